"""A thin handle on a Git repository driven through the git binary."""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path

GIT_BINARY = "git"
COMMITTER_TIME_KEY = "GIT_COMMITTER_DATE"
AUTHOR_TIME_KEY = "GIT_AUTHOR_DATE"

Clock = Callable[[], datetime]


def _local_now() -> datetime:
    return datetime.now().astimezone()


class GitCommandError(RuntimeError):
    """A git invocation exited with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stdout: str, stderr: str) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"exit status {returncode} when executing "
            f"`git {' '.join(args)}`: {stderr}"
        )


def _run_git(
    args: list[str],
    env: Mapping[str, str] | None = None,
    stdin: bytes | str | None = None,
) -> str:
    """Run git with the given arguments; return stripped stdout."""
    full_env = {**os.environ, **env} if env else None
    data = stdin.encode() if isinstance(stdin, str) else stdin
    result = subprocess.run(
        [GIT_BINARY, *args],
        input=data,
        stdin=subprocess.DEVNULL if data is None else None,
        capture_output=True,
        env=full_env,
        check=False,
    )
    stdout = result.stdout.decode(errors="replace")
    if result.returncode != 0:
        raise GitCommandError(
            args, result.returncode, stdout, result.stderr.decode(errors="replace")
        )
    return stdout.strip()


class Repository:
    """A Git repository identified by the path of its GIT_DIR."""

    def __init__(self, git_dir: str | os.PathLike[str], clock: Clock | None = None) -> None:
        self.git_dir = os.fspath(git_dir)
        self._clock: Clock = clock or _local_now

    def __repr__(self) -> str:
        return f"Repository({self.git_dir!r})"

    def run_git(
        self,
        *args: str,
        env: Mapping[str, str] | None = None,
        stdin: bytes | str | None = None,
    ) -> str:
        """Run a git command against this repository; return stripped stdout."""
        return _run_git(["--git-dir", self.git_dir, *args], env=env, stdin=stdin)

    def now(self) -> datetime:
        """Return the current time according to the repository's clock."""
        return self._clock()

    def get_git_config(self) -> dict[str, str]:
        """Return the applicable Git config with lower-cased keys."""
        output = self.run_git("config", "--get-regexp", ".*")
        config: dict[str, str] = {}
        for line in output.splitlines():
            key, sep, value = line.partition(" ")
            if not sep:
                continue
            config[key.lower()] = value
        return config

    def set_git_config(self, key: str, value: str) -> None:
        """Set a config key to a value in the repository's local config."""
        try:
            self.run_git("config", "--local", key, value)
        except GitCommandError as err:
            raise GitCommandError(
                err.command, err.returncode, err.stdout,
                f"unable to set '{key}' to '{value}': {err.stderr}",
            ) from err


def load_repository() -> Repository:
    """Open the repository for the current directory or $GIT_DIR."""
    if shutil.which(GIT_BINARY) is None:
        raise FileNotFoundError("unable to find Git binary, is Git installed?")

    git_dir = os.environ.get("GIT_DIR")
    if git_dir:
        return Repository(git_dir)

    return Repository(_run_git(["rev-parse", "--git-dir"]))


def init_repository(
    directory: str | os.PathLike[str],
    initial_branch: str = "main",
    clock: Clock | None = None,
) -> Repository:
    """Create a new repository in directory and return a handle on it."""
    _run_git(["init", "-b", initial_branch, os.fspath(directory)])
    return Repository(Path(directory) / ".git", clock=clock)
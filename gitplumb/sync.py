"""Pushing to, fetching from and cloning remote repositories."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable, Sequence
from pathlib import Path

from gitplumb.references import (
    BRANCH_REF_PREFIX,
    TAG_REF_PREFIX,
    ReferenceNotFoundError,
    get_reference,
    ref_spec,
)
from gitplumb.repository import GIT_BINARY, GitCommandError, Repository

DEFAULT_REMOTE_NAME = "origin"


def _source_of(spec: str) -> str:
    return spec.lstrip("+").partition(":")[0]


def _has_source(repo: Repository, spec: str) -> bool:
    source = _source_of(spec)
    if not source:
        # An empty source deletes the destination on the remote.
        return True
    try:
        get_reference(repo, source)
    except ReferenceNotFoundError:
        return False
    return True


def push_ref_spec(
    repo: Repository, remote_name: str, ref_specs: Sequence[str]
) -> None:
    """Push the refspecs to the remote atomically.

    Refspecs whose local source does not exist have nothing to push and are
    skipped; pushing nothing is not an error.
    """
    specs = [spec for spec in ref_specs if _has_source(repo, spec)]
    if not specs:
        return
    repo.run_git("push", "--atomic", remote_name, *specs)


def push(repo: Repository, remote_name: str, refs: Iterable[str]) -> None:
    """Push the refs to the same names on the remote, fast-forward only."""
    specs = [ref_spec(repo, ref, "", True) for ref in refs]
    push_ref_spec(repo, remote_name, specs)


def fetch_ref_spec(
    repo: Repository, remote_name: str, ref_specs: Sequence[str]
) -> None:
    """Fetch the refspecs from the remote; an empty remote is not an error."""
    if not repo.run_git("ls-remote", remote_name):
        return
    repo.run_git("fetch", "--update-head-ok", remote_name, *ref_specs)


def fetch(
    repo: Repository,
    remote_name: str,
    refs: Iterable[str],
    fast_forward_only: bool = False,
) -> None:
    """Fetch the refs into both their own names and their remote trackers."""
    specs: list[str] = []
    for ref in refs:
        specs.append(ref_spec(repo, ref, remote_name, fast_forward_only))
        specs.append(ref_spec(repo, ref, "", fast_forward_only))
    fetch_ref_spec(repo, remote_name, specs)


def _short_branch(name: str) -> str:
    for prefix in (BRANCH_REF_PREFIX, TAG_REF_PREFIX):
        if name.startswith(prefix):
            return name[len(prefix):]
    return name


def clone_and_fetch(
    remote_url: str,
    directory: str | os.PathLike[str],
    initial_branch: str = "",
    refs: Iterable[str] | None = None,
) -> Repository:
    """Clone remote_url into directory and also fetch the listed refs."""
    args = ["clone"]
    if initial_branch:
        args += ["--branch", _short_branch(initial_branch)]
    args += [remote_url, os.fspath(directory)]

    result = subprocess.run(
        [GIT_BINARY, *args],
        capture_output=True,
        stdin=subprocess.DEVNULL,
        check=False,
    )
    if result.returncode != 0:
        raise GitCommandError(
            args,
            result.returncode,
            result.stdout.decode(errors="replace"),
            result.stderr.decode(errors="replace"),
        )

    repo = Repository(Path(directory) / ".git")
    refs = list(refs or [])
    if refs:
        fetch(repo, DEFAULT_REMOTE_NAME, refs, True)
    return repo
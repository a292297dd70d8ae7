"""Reading, writing and naming Git references."""

from __future__ import annotations

import os
import posixpath

from gitplumb.hash import Hash, HashError, new_hash
from gitplumb.repository import GitCommandError, Repository

REF_PREFIX = "refs/"
BRANCH_REF_PREFIX = "refs/heads/"
TAG_REF_PREFIX = "refs/tags/"
REMOTE_REF_PREFIX = "refs/remotes/"

_NOT_FOUND_MARKER = "unknown revision or path not in the working tree"


class ReferenceNotFoundError(LookupError):
    """The requested Git reference does not exist."""

    def __init__(self, ref_name: str = "") -> None:
        message = "requested Git reference not found"
        if ref_name:
            message = f"{message}: {ref_name!r}"
        super().__init__(message)
        self.ref_name = ref_name


def _rewrap(err: GitCommandError, context: str) -> GitCommandError:
    return GitCommandError(
        err.command, err.returncode, err.stdout, f"{context}: {err.stderr}"
    )


def _join(*parts: str) -> str:
    joined = "/".join(part for part in parts if part)
    return posixpath.normpath(joined) if joined else ""


def get_reference(repo: Repository, ref_name: str) -> Hash:
    """Return the Git ID at the tip of the reference."""
    try:
        tip = repo.run_git("rev-parse", ref_name)
    except GitCommandError as err:
        if _NOT_FOUND_MARKER in err.stderr:
            raise ReferenceNotFoundError(ref_name) from err
        raise _rewrap(err, f"unable to read reference '{ref_name}'") from err

    try:
        return new_hash(tip)
    except HashError as err:
        raise ValueError(f"invalid Git ID for reference '{ref_name}': {err}") from err


def set_reference(repo: Repository, ref_name: str, git_id: Hash) -> None:
    """Point the reference at git_id unconditionally."""
    try:
        repo.run_git("update-ref", "--create-reflog", ref_name, str(git_id))
    except GitCommandError as err:
        raise _rewrap(
            err, f"unable to set Git reference '{ref_name}' to '{git_id}'"
        ) from err


def check_and_set_reference(
    repo: Repository, ref_name: str, new_git_id: Hash, old_git_id: Hash
) -> None:
    """Point the reference at new_git_id if it currently holds old_git_id."""
    try:
        repo.run_git(
            "update-ref", "--create-reflog", ref_name, str(new_git_id), str(old_git_id)
        )
    except GitCommandError as err:
        raise _rewrap(
            err, f"unable to set Git reference '{ref_name}' to '{new_git_id}'"
        ) from err


def get_symbolic_reference_target(repo: Repository, ref_name: str) -> str:
    """Return the name of the reference a symbolic reference points to."""
    try:
        return repo.run_git("symbolic-ref", ref_name)
    except GitCommandError as err:
        raise _rewrap(err, f"unable to resolve {ref_name}") from err


def _reference_exists(repo: Repository, ref_name: str) -> bool:
    try:
        get_reference(repo, ref_name)
    except ReferenceNotFoundError:
        return False
    return True


def absolute_reference(repo: Repository, target: str) -> str:
    """Return the fully qualified reference name for a short or full ref."""
    if os.path.exists(os.path.join(repo.git_dir, target)):
        if target.startswith(REF_PREFIX):
            return target
        # A symbolic ref such as HEAD.
        return get_symbolic_reference_target(repo, target)

    for candidate in (
        custom_reference_name(target),
        tag_reference_name(target),
        branch_reference_name(target),
    ):
        if _reference_exists(repo, candidate):
            return candidate

    remote_name = remote_reference_name(target)
    if _reference_exists(repo, remote_name) or _reference_exists(
        repo, _join(remote_name, "HEAD")
    ):
        return branch_reference_name(target)

    raise ReferenceNotFoundError(target)


def ref_spec(
    repo: Repository | None,
    ref_name: str,
    remote_name: str = "",
    fast_forward_only: bool = False,
) -> str:
    """Build a refspec for ref_name, tracked under remote_name if given."""
    ref_path = ref_name
    if not ref_path.startswith(REF_PREFIX):
        if repo is None:
            raise ValueError(f"a repository is needed to resolve '{ref_name}'")
        ref_path = absolute_reference(repo, ref_name)

    if ref_path.startswith(TAG_REF_PREFIX):
        fast_forward_only = True

    remote_path = remote_ref(ref_path, remote_name) if remote_name else ref_path

    spec = f"{ref_path}:{remote_path}"
    return spec if fast_forward_only else f"+{spec}"


def remote_ref(ref_name: str, remote_name: str) -> str:
    """Return where a remote tracks ref_name; tags map to themselves."""
    if ref_name.startswith(BRANCH_REF_PREFIX):
        rest = ref_name[len(BRANCH_REF_PREFIX):]
        return _join(REMOTE_REF_PREFIX, remote_name, rest)
    if ref_name.startswith(TAG_REF_PREFIX):
        return ref_name
    rest = ref_name[len(REF_PREFIX):] if ref_name.startswith(REF_PREFIX) else ref_name
    return _join(REMOTE_REF_PREFIX, remote_name, rest)


def custom_reference_name(custom_name: str) -> str:
    """Return the name in the form refs/<custom_name>."""
    if custom_name.startswith(REF_PREFIX):
        return custom_name
    return f"{REF_PREFIX}{custom_name}"


def tag_reference_name(tag_name: str) -> str:
    """Return the name in the form refs/tags/<tag_name>."""
    if tag_name.startswith(TAG_REF_PREFIX):
        return tag_name
    return f"{TAG_REF_PREFIX}{tag_name}"


def branch_reference_name(branch_name: str) -> str:
    """Return the name in the form refs/heads/<branch_name>."""
    if branch_name.startswith(BRANCH_REF_PREFIX):
        return branch_name
    return f"{BRANCH_REF_PREFIX}{branch_name}"


def remote_reference_name(name: str) -> str:
    """Return the name in the form refs/remotes/<name>."""
    if name.startswith(REMOTE_REF_PREFIX):
        return name
    return f"{REMOTE_REF_PREFIX}{name}"
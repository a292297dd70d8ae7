"""Creating and inspecting Git commits."""

from __future__ import annotations

from gitplumb.hash import ZERO_HASH, Hash, HashError, new_hash
from gitplumb.references import (
    ReferenceNotFoundError,
    check_and_set_reference,
    get_reference,
)
from gitplumb.repository import (
    AUTHOR_TIME_KEY,
    COMMITTER_TIME_KEY,
    GitCommandError,
    Repository,
)


class NotACommitError(ValueError):
    """The Git ID names an object that is not a commit."""

    def __init__(self, object_id: Hash) -> None:
        super().__init__(f"requested Git ID '{object_id}' is not a commit object")
        self.object_id = object_id


def _rewrap(err: GitCommandError, context: str) -> GitCommandError:
    return GitCommandError(
        err.command, err.returncode, err.stdout, f"{context}: {err.stderr}"
    )


def _parse_id(value: str, context: str) -> Hash:
    try:
        return new_hash(value)
    except HashError as err:
        raise ValueError(f"{context}: {err}") from err


def _timestamp(repo: Repository) -> str:
    now = repo.now()
    if now.tzinfo is None:
        now = now.astimezone()
    return now.isoformat(timespec="seconds")


def commit(
    repo: Repository,
    tree_id: Hash,
    target_ref: str,
    message: str,
    sign: bool = False,
) -> Hash:
    """Create a commit of tree_id on top of target_ref and advance the ref.

    This is meant for metadata references and never touches a worktree.
    """
    try:
        current_id = get_reference(repo, target_ref)
    except ReferenceNotFoundError:
        current_id = ZERO_HASH

    args = ["commit-tree", "-m", message]
    if not current_id.is_zero():
        args += ["-p", str(current_id)]
    if sign:
        args.append("-S")
    args.append(str(tree_id))

    now = _timestamp(repo)
    env = {COMMITTER_TIME_KEY: now, AUTHOR_TIME_KEY: now}

    try:
        output = repo.run_git(*args, env=env)
    except GitCommandError as err:
        raise _rewrap(err, "unable to create commit") from err

    commit_id = _parse_id(output, "received invalid commit ID")
    check_and_set_reference(repo, target_ref, commit_id, current_id)
    return commit_id


def ensure_is_commit(repo: Repository, commit_id: Hash) -> None:
    """Raise NotACommitError unless commit_id names a commit object."""
    try:
        object_type = repo.run_git("cat-file", "-t", str(commit_id))
    except GitCommandError as err:
        raise _rewrap(err, "unable to inspect if object is commit") from err
    if object_type != "commit":
        raise NotACommitError(commit_id)


def _show(repo: Repository, commit_id: Hash, fmt: str, what: str) -> str:
    ensure_is_commit(repo, commit_id)
    try:
        return repo.run_git("show", "-s", f"--format={fmt}", str(commit_id))
    except GitCommandError as err:
        raise _rewrap(err, f"unable to identify {what} for commit '{commit_id}'") from err


def get_commit_message(repo: Repository, commit_id: Hash) -> str:
    """Return the commit's message with surrounding whitespace removed."""
    return _show(repo, commit_id, "%B", "message")


def get_commit_tree_id(repo: Repository, commit_id: Hash) -> Hash:
    """Return the ID of the commit's tree."""
    output = _show(repo, commit_id, "%T", "tree")
    return _parse_id(output, f"invalid tree for commit ID '{commit_id}'")


def get_commit_parent_ids(repo: Repository, commit_id: Hash) -> list[Hash]:
    """Return the commit's parent IDs in order; empty for a root commit."""
    output = _show(repo, commit_id, "%P", "parents")
    return [
        _parse_id(parent, f"invalid parent commit ID '{parent}'")
        for parent in output.split(" ")
        if parent
    ]


def knows_commit(
    repo: Repository, test_commit_id: Hash, ancestor_commit_id: Hash
) -> bool:
    """Return True if ancestor_commit_id is reachable from test_commit_id.

    A commit knows itself.
    """
    ensure_is_commit(repo, test_commit_id)
    ensure_is_commit(repo, ancestor_commit_id)
    try:
        repo.run_git(
            "merge-base", "--is-ancestor", str(ancestor_commit_id), str(test_commit_id)
        )
    except GitCommandError:
        return False
    return True
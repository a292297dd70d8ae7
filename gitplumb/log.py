"""Walking ranges of commit history."""

from __future__ import annotations

from gitplumb.hash import Hash, new_hash
from gitplumb.repository import Repository

_NON_COMMIT_TYPES = frozenset({"blob", "tree"})


def _object_type(repo: Repository, object_id: Hash) -> str:
    return repo.run_git("cat-file", "-t", str(object_id))


def get_commits_between_range(
    repo: Repository, commit_new_id: Hash, commit_old_id: Hash
) -> list[Hash]:
    """Return commits reachable from the new commit but not from the old one.

    The new commit is included and the old one excluded. If the old commit is
    the zero hash, every commit reachable from the new one is returned. The
    result is sorted by commit ID so that it is deterministic.
    """
    if _object_type(repo, commit_new_id) in _NON_COMMIT_TYPES:
        return []

    args = ["rev-list", str(commit_new_id)]
    if not commit_old_id.is_zero():
        if _object_type(repo, commit_old_id) not in _NON_COMMIT_TYPES:
            args.append(f"^{commit_old_id}")

    output = repo.run_git(*args)
    commit_ids = [new_hash(line) for line in output.splitlines() if line]
    return sorted(commit_ids, key=str)
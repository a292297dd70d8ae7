"""Creating and inspecting annotated Git tags."""

from __future__ import annotations

from gitplumb.hash import Hash, HashError, new_hash
from gitplumb.references import (
    TAG_REF_PREFIX,
    ReferenceNotFoundError,
    absolute_reference,
    get_reference,
    tag_reference_name,
)
from gitplumb.repository import (
    AUTHOR_TIME_KEY,
    COMMITTER_TIME_KEY,
    GitCommandError,
    Repository,
)


class TagAlreadyExistsError(ValueError):
    """A tag with the requested name already exists."""

    def __init__(self, name: str = "") -> None:
        message = "tag already exists"
        if name:
            message = f"{message}: {name!r}"
        super().__init__(message)
        self.name = name


def _rewrap(err: GitCommandError, context: str) -> GitCommandError:
    return GitCommandError(
        err.command, err.returncode, err.stdout, f"{context}: {err.stderr}"
    )


def _timestamp(repo: Repository) -> str:
    now = repo.now()
    if now.tzinfo is None:
        now = now.astimezone()
    return now.isoformat(timespec="seconds")


def is_tag(repo: Repository, target: str) -> bool:
    """Return True if target names a tag reference or a tag object."""
    try:
        if absolute_reference(repo, target).startswith(TAG_REF_PREFIX):
            return True
    except (ReferenceNotFoundError, GitCommandError):
        pass

    try:
        object_id = new_hash(target)
    except HashError:
        return False

    try:
        return repo.run_git("cat-file", "-t", str(object_id)) == "tag"
    except GitCommandError:
        return False


def tag(
    repo: Repository,
    target: Hash,
    name: str,
    message: str,
    sign: bool = False,
) -> Hash:
    """Create an annotated tag called name pointing at target; return its ID."""
    ref_name = tag_reference_name(name)
    try:
        get_reference(repo, ref_name)
    except ReferenceNotFoundError:
        pass
    else:
        raise TagAlreadyExistsError(name)

    try:
        repo.run_git("cat-file", "-e", str(target))
    except GitCommandError as err:
        raise LookupError(f"object not found: {target}") from err

    args = ["tag", "-s" if sign else "-a", "-m", message, name, str(target)]
    now = _timestamp(repo)
    env = {COMMITTER_TIME_KEY: now, AUTHOR_TIME_KEY: now}
    try:
        repo.run_git(*args, env=env)
    except GitCommandError as err:
        raise _rewrap(err, f"unable to create tag '{name}'") from err

    return get_reference(repo, ref_name)


def get_tag_target(repo: Repository, tag_id: Hash) -> Hash:
    """Return the ID of the commit the tag ultimately points to."""
    try:
        output = repo.run_git("rev-list", "-n", "1", str(tag_id))
    except GitCommandError as err:
        raise _rewrap(err, "unable to resolve tag's target ID") from err

    try:
        return new_hash(output)
    except HashError as err:
        raise ValueError(f"invalid format for target ID: {err}") from err
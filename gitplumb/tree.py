"""Building and inspecting Git trees."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Union

from gitplumb.hash import Hash, HashError, new_hash
from gitplumb.repository import GitCommandError, Repository

_MODE_TREE = "040000"
_MODE_REGULAR = "100644"

_Node = dict[str, Union["_Node", Hash]]


def _rewrap(err: GitCommandError, context: str) -> GitCommandError:
    return GitCommandError(
        err.command, err.returncode, err.stdout, f"{context}: {err.stderr}"
    )


def _parse_id(value: str, context: str) -> Hash:
    try:
        return new_hash(value)
    except HashError as err:
        raise ValueError(f"{context}: {err}") from err


class TreeBuilder:
    """Creates multi-level trees in a repository from a map of paths to blobs.

    Only regular files (mode 100644) and subtrees are written, which is all
    that is needed for metadata trees.
    """

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def write_root_tree_from_blob_ids(self, files: Mapping[str, Hash] | None) -> Hash:
        """Write the trees holding the given files; return the root tree ID."""
        root: _Node = {}
        for path, blob_id in (files or {}).items():
            self._insert(root, path, blob_id)
        return self._write(root)

    @staticmethod
    def _insert(root: _Node, path: str, blob_id: Hash) -> None:
        parts = [part for part in path.split("/") if part not in ("", ".")]
        if not parts:
            raise ValueError(f"invalid path for tree entry: {path!r}")

        node = root
        for part in parts[:-1]:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                raise ValueError(f"path '{path}' conflicts with file '{part}'")
            node = child

        leaf = parts[-1]
        if isinstance(node.get(leaf), dict):
            raise ValueError(f"path '{path}' conflicts with a directory")
        node[leaf] = blob_id

    def _write(self, node: _Node) -> Hash:
        lines = []
        for name, value in node.items():
            if isinstance(value, dict):
                lines.append(f"{_MODE_TREE} tree {self._write(value)}\t{name}\n")
            else:
                lines.append(f"{_MODE_REGULAR} blob {value}\t{name}\n")

        try:
            output = self.repo.run_git("mktree", stdin="".join(lines))
        except GitCommandError as err:
            raise _rewrap(err, "unable to write Git tree") from err
        return _parse_id(output, "invalid tree ID")


def empty_tree(repo: Repository) -> Hash:
    """Return the ID of the empty tree for the repository's hash function."""
    try:
        output = repo.run_git("hash-object", "-t", "tree", "--stdin", stdin=b"")
    except GitCommandError as err:
        raise _rewrap(err, "unable to hash empty tree") from err
    return _parse_id(output, "empty tree has invalid Git ID")


def get_all_files_in_tree(repo: Repository, tree_id: Hash) -> dict[str, Hash]:
    """Return every file path in the tree, recursively, with its blob ID."""
    try:
        output = repo.run_git("ls-tree", "-r", "-z", str(tree_id))
    except GitCommandError as err:
        raise _rewrap(err, "unable to enumerate all files in tree") from err

    files: dict[str, Hash] = {}
    for record in output.split("\0"):
        record = record.strip("\n")
        if not record:
            continue
        meta, _, path = record.partition("\t")
        object_id = meta.split(" ")[-1]
        files[path] = _parse_id(object_id, f"invalid Git ID '{object_id}' for path '{path}'")
    return files


def _ensure_is_commit(repo: Repository, commit_id: Hash) -> None:
    try:
        object_type = repo.run_git("cat-file", "-t", str(commit_id))
    except GitCommandError as err:
        raise _rewrap(err, "unable to inspect if object is commit") from err
    if object_type != "commit":
        raise ValueError(f"requested Git ID '{commit_id}' is not a commit object")


def get_merge_tree(repo: Repository, commit_a_id: Hash, commit_b_id: Hash) -> Hash:
    """Compute the tree of merging commit B into commit A, without storing a commit.

    If commit A is the zero hash, commit B's tree is returned.
    """
    _ensure_is_commit(repo, commit_a_id)
    _ensure_is_commit(repo, commit_b_id)

    if commit_a_id.is_zero():
        try:
            output = repo.run_git("show", "-s", "--format=%T", str(commit_b_id))
        except GitCommandError as err:
            raise _rewrap(err, f"unable to identify tree for commit '{commit_b_id}'") from err
        return _parse_id(output, f"invalid tree for commit ID '{commit_b_id}'")

    try:
        output = repo.run_git("merge-tree", str(commit_a_id), str(commit_b_id))
    except GitCommandError as err:
        raise _rewrap(err, "unable to compute merge tree") from err
    return _parse_id(output, "invalid merge tree ID")
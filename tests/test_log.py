import pytest

from gitplumb.hash import ZERO_HASH, Hash, new_hash
from gitplumb.log import get_commits_between_range
from gitplumb.repository import GitCommandError, init_repository
from gitplumb.tree import TreeBuilder

FIXED_DATE = "1995-10-26T09:00:00Z"


@pytest.fixture
def repo(tmp_path):
    repository = init_repository(tmp_path / "repo")
    repository.set_git_config("user.name", "Jane Doe")
    repository.set_git_config("user.email", "jane.doe@example.com")
    repository.set_git_config("commit.gpgsign", "false")
    return repository


def _write_blob(repo, contents: bytes) -> Hash:
    return new_hash(repo.run_git("hash-object", "-w", "--stdin", stdin=contents))


def _commit(repo, tree_id, parents, message):
    args = ["commit-tree", str(tree_id), "-m", message]
    for parent in parents:
        args += ["-p", str(parent)]
    env = {"GIT_AUTHOR_DATE": FIXED_DATE, "GIT_COMMITTER_DATE": FIXED_DATE}
    return new_hash(repo.run_git(*args, env=env))


def _trees(repo, blob_id, count):
    builder = TreeBuilder(repo)
    return [
        builder.write_root_tree_from_blob_ids({str(j + 1): blob_id for j in range(i)})
        for i in range(1, count + 1)
    ]


def _sorted(ids):
    return sorted(ids, key=str)


@pytest.fixture
def linear(repo):
    empty_blob = _write_blob(repo, b"")
    trees = _trees(repo, empty_blob, 5)
    commits = []
    for tree_id in trees:
        commits.append(_commit(repo, tree_id, commits[-1:], "Test commit"))
    return repo, commits, empty_blob


def test_range_between_first_and_last(linear):
    repo, commits, _ = linear
    result = get_commits_between_range(repo, commits[4], commits[0])
    assert result == _sorted(commits[1:])


def test_range_wrong_order_is_empty(linear):
    repo, commits, _ = linear
    assert get_commits_between_range(repo, commits[0], commits[4]) == []


def test_range_all_commits(linear):
    repo, commits, _ = linear
    assert get_commits_between_range(repo, commits[4], ZERO_HASH) == _sorted(commits)


def test_range_from_zero_hash_raises(linear):
    repo, _, _ = linear
    with pytest.raises(GitCommandError):
        get_commits_between_range(repo, ZERO_HASH, ZERO_HASH)


def test_range_from_non_commit_object_is_empty(linear):
    repo, _, empty_blob = linear
    assert get_commits_between_range(repo, empty_blob, ZERO_HASH) == []


@pytest.fixture
def merges(repo):
    empty_blob = _write_blob(repo, b"")
    trees = _trees(repo, empty_blob, 6)
    c1 = _commit(repo, trees[0], [], "Test commit 1")
    c2 = _commit(repo, trees[1], [c1], "Test commit 2")
    c3 = _commit(repo, trees[2], [c1], "Test commit 3")
    c4 = _commit(repo, trees[3], [c2], "Test commit 4")
    c5 = _commit(repo, trees[4], [c2, c3], "Test commit 5")
    c6 = _commit(repo, trees[5], [c3], "Test commit 6")
    return repo, [c1, c2, c3, c4, c5, c6]


@pytest.mark.parametrize(
    "target, expected",
    [
        (0, [0]),
        (1, [1, 0]),
        (2, [0, 2]),
        (3, [1, 0, 3]),
        (4, [4, 1, 0, 2]),
        (5, [0, 5, 2]),
    ],
)
def test_range_with_merge_commits(merges, target, expected):
    repo, commits = merges
    result = get_commits_between_range(repo, commits[target], ZERO_HASH)
    assert result == _sorted(commits[i] for i in expected)


def test_result_is_sorted_by_id(merges):
    repo, commits = merges
    result = get_commits_between_range(repo, commits[4], ZERO_HASH)
    assert [str(c) for c in result] == sorted(str(c) for c in result)
    assert len(result) == 4
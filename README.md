# gitplumb

`gitplumb` is a small library that works with a Git repository by running
Git's own plumbing commands. It needs the `git` executable on `PATH` and has
no other runtime dependencies. Signing uses whichever tool Git is configured
to use: `gpg`, `ssh-keygen` or `gpgsm`.

## Installation

```
pip install gitplumb
```

## Modules

### `gitplumb.hash`

- `Hash` is a `bytes` subclass that holds the raw bytes of an object ID.
  `str()` returns the hex form. `is_zero()` is true for the all-zero SHA-1 or
  SHA-256 ID.
- `new_hash(h)` parses a 40- or 64-character hex string. It raises
  `InvalidHashLengthError` if the length is wrong and
  `InvalidHashEncodingError` if the string is not hex. Both errors derive from
  `ValueError`.
- `ZERO_HASH` is the all-zero SHA-1 ID.

### `gitplumb.repository`

- `Repository(git_dir, clock=None)` is a handle on a `GIT_DIR`. `clock` is
  an optional callable that returns a `datetime`, and `now()` returns its
  value. Without a clock, `now()` returns the local time.
- `Repository.run_git(*args, env=None, stdin=None)` runs
  `git --git-dir <git_dir> ...` and returns stdout with surrounding whitespace
  removed. If git exits with a non-zero status it raises `GitCommandError`,
  which carries `command`, `returncode`, `stdout` and `stderr`.
- `Repository.get_git_config()` returns the applicable config as a dict with
  lower-cased keys. `Repository.set_git_config(key, value)` writes to the
  repository's local config.
- `load_repository()` opens the repository named by `$GIT_DIR`, or else the
  one that contains the current directory. `init_repository(directory,
  initial_branch="main", clock=None)` creates a new repository.

### `gitplumb.keys`

- `parse_git_config(text)` parses the output of
  `git config --get-regexp .*`. `read_git_config()` runs that command and
  returns the parsed result.
- `get_signing_method(config)` returns a `SigningMethod`: `GPG`, `SSH` or
  `X509`. It reads `gpg.format` and defaults to GPG when that key is not set,
  and it raises `UnknownSigningMethodError` for any other value.
- `get_signing_key_info(config)` returns `user.signingkey`, or `""` when it
  is not set. `get_signing_program(config, method)` returns the configured
  program, or `gpg`, `ssh-keygen` or `gpgsm` by default.
- `get_signing_info(config=None)` returns `(method, key_info, program)`, and
  `get_signing_command(config=None)` returns `(program, args)`. SSH signing
  without a key raises `SigningKeyNotSpecifiedError`. When `config` is
  omitted, both functions read the config with `read_git_config()`.
- `sign_git_object(contents, config=None)` runs the signing command on
  `contents` and returns the detached, armored signature. It raises
  `UnableToSignError` if the signer produces no output.

### `gitplumb.references`

- `get_reference(repo, ref_name)` returns the `Hash` at the tip of the
  reference and raises `ReferenceNotFoundError` if the reference does not
  exist.
- `set_reference(repo, ref_name, git_id)` moves the reference
  unconditionally. `check_and_set_reference(repo, ref_name, new_git_id,
  old_git_id)` moves it only if it currently holds `old_git_id`.
- `get_symbolic_reference_target(repo, ref_name)` returns the target of a
  symbolic reference such as `HEAD`.
- `absolute_reference(repo, target)` resolves a short name to a full
  reference name. It tries `refs/<name>`, then tags, then branches, then
  remote trackers.
- `ref_spec(repo, ref_name, remote_name="", fast_forward_only=False)` builds
  a refspec. A leading `+` is added unless `fast_forward_only` is set. Tags
  are always fast-forward only, and they map to themselves even when a remote
  is given.
- `remote_ref(ref_name, remote_name)` returns the remote-tracking name. It
  maps `refs/heads/x` to `refs/remotes/<remote>/x` and `refs/x` to
  `refs/remotes/<remote>/x`, and it leaves tags unchanged.
- `custom_reference_name`, `tag_reference_name`, `branch_reference_name` and
  `remote_reference_name` add the `refs/`, `refs/tags/`, `refs/heads/` or
  `refs/remotes/` prefix if it is missing.

### `gitplumb.tree`

- `TreeBuilder(repo).write_root_tree_from_blob_ids(files)` takes a mapping of
  slash-separated paths to blob IDs, writes every tree that is needed, and
  returns the ID of the root tree. Files are written with mode 100644 and
  directories as subtrees. An empty mapping, or `None`, gives the empty tree.
- `empty_tree(repo)` returns the ID of the empty tree.
- `get_all_files_in_tree(repo, tree_id)` returns `{path: blob_id}` for every
  file in the tree, recursively.
- `get_merge_tree(repo, commit_a_id, commit_b_id)` returns the tree that
  results from merging B into A, without storing a commit.

### `gitplumb.log`

- `get_commits_between_range(repo, commit_new_id, commit_old_id)` returns the
  IDs of the commits that are reachable from the new commit but not from the
  old one. The new commit is included and the old one is excluded. If the old
  ID is the zero hash, every commit reachable from the new one is returned.
  The result is sorted by ID.

### `gitplumb.commit`

- `commit(repo, tree_id, target_ref, message, sign=False)` creates a commit
  on top of `target_ref`, or a root commit if the reference does not exist
  yet. It dates the commit with `repo.now()` and advances the reference with
  a compare-and-set. If `sign` is set, git signs the commit with `-S`. No
  worktree is touched.
- `ensure_is_commit(repo, commit_id)` raises `NotACommitError` if the ID
  names an object that is not a commit.
- `get_commit_message`, `get_commit_tree_id` and `get_commit_parent_ids`
  inspect a commit.
- `knows_commit(repo, test_commit_id, ancestor_commit_id)` is true if the
  ancestor is reachable from the test commit. A commit knows itself.

### `gitplumb.tag`

- `tag(repo, target, name, message, sign=False)` creates an annotated tag,
  or a signed tag if `sign` is set, and returns the ID of the tag object. It
  raises `TagAlreadyExistsError` if the tag exists and `LookupError` if the
  target object is missing.
- `is_tag(repo, target)` is true if `target` resolves to a `refs/tags/`
  reference or names a tag object.
- `get_tag_target(repo, tag_id)` returns the commit the tag points to.

### `gitplumb.sync`

- `push_ref_spec(repo, remote_name, ref_specs)` pushes atomically. Refspecs
  whose local source does not exist are skipped, and pushing nothing is not
  an error.
- `push(repo, remote_name, refs)` pushes each ref to the same name on the
  remote, fast-forward only.
- `fetch_ref_spec(repo, remote_name, ref_specs)` fetches the refspecs. An
  empty remote is not an error.
- `fetch(repo, remote_name, refs, fast_forward_only=False)` fetches each ref
  into both its own name and its remote tracker.
- `clone_and_fetch(remote_url, directory, initial_branch="", refs=None)`
  clones the remote, fetches the extra refs from `origin`, and returns the
  new `Repository`.

## Example

```python
from gitplumb.repository import load_repository
from gitplumb.tree import TreeBuilder
from gitplumb.commit import commit
from gitplumb.references import get_reference, ref_spec

repo = load_repository()
tree_id = TreeBuilder(repo).write_root_tree_from_blob_ids({})
commit_id = commit(repo, tree_id, "refs/example/metadata", "Initial commit\n")
assert get_reference(repo, "refs/example/metadata") == commit_id

print(ref_spec(repo, "refs/heads/main", "origin", False))
# +refs/heads/main:refs/remotes/origin/main
```

## What it does not do

- It does not verify signatures on commits or tags. It only produces
  signatures, using the signer configured in Git.
- It cannot sign with a private key passed in directly. Signing always uses
  the configured tool and key.
- It has no in-memory repositories. Every operation runs `git` against a
  repository on disk.
- It provides no command-line program. It is a library only.
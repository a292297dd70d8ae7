"""Git plumbing through the git binary: object IDs, config, signing settings, references, trees, history, commits, tags and sync."""

__version__ = "0.1.0"

__all__ = [
    "hash",
    "repository",
    "keys",
    "references",
    "tree",
    "log",
    "commit",
    "tag",
    "sync",
]
"""Git object IDs in their SHA-1 and SHA-256 forms."""

from __future__ import annotations

import hashlib
import string

SHA1_SIZE = hashlib.sha1().digest_size
SHA256_SIZE = hashlib.sha256().digest_size

_HEX_DIGITS = frozenset(string.hexdigits)


class HashError(ValueError):
    """Base class for malformed Git object IDs."""


class InvalidHashEncodingError(HashError):
    """The hash string is not hex encoded."""

    def __init__(self, value: str = "") -> None:
        super().__init__(f"hash string is not hex encoded: {value!r}")


class InvalidHashLengthError(HashError):
    """The hash string has the wrong length for SHA-1 or SHA-256."""

    def __init__(self, value: str = "") -> None:
        super().__init__(f"hash string is wrong length: {value!r}")


class Hash(bytes):
    """The raw bytes of a Git object ID; str() gives the hex form."""

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Hash({self.hex()!r})"

    def is_zero(self) -> bool:
        """Return True for the all-zero SHA-1 or SHA-256 hash."""
        return len(self) in (SHA1_SIZE, SHA256_SIZE) and not any(self)


ZERO_HASH = Hash(bytes(SHA1_SIZE))


def new_hash(h: str) -> Hash:
    """Parse a hex encoded SHA-1 or SHA-256 Git object ID."""
    if len(h) not in (SHA1_SIZE * 2, SHA256_SIZE * 2):
        raise InvalidHashLengthError(h)
    if not _HEX_DIGITS.issuperset(h):
        raise InvalidHashEncodingError(h)
    return Hash(bytes.fromhex(h))
import pytest

from gitplumb.hash import (
    ZERO_HASH,
    Hash,
    InvalidHashEncodingError,
    InvalidHashLengthError,
    new_hash,
)

VALID = {
    "correctly encoded SHA-1 hash": "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391",
    "correctly encoded SHA-256 hash": (
        "61658570165bc04af68cef20d72da49b070dc9d8cd7c8a526c950b658f4d3ccf"
    ),
    "correctly encoded SHA-1 zero hash": "0" * 40,
    "correctly encoded SHA-256 zero hash": "0" * 64,
}

INVALID = {
    "incorrect length SHA-1 hash": ("e69de29bb2d1d6434b8", InvalidHashLengthError),
    "incorrect length SHA-256 hash": (
        "61658570165bc04af68cef20d72da49b070dc9d8cd7c8a526c950b658f4d3ccfabcdef",
        InvalidHashLengthError,
    ),
    "incorrectly encoded SHA-1 hash": (
        "e69de29bb2d1d6434b8b29ae775ad8c2e48c539g",
        InvalidHashEncodingError,
    ),
    "incorrectly encoded SHA-256 hash": (
        "61658570165bc04af68cef20d72da49b070dc9d8cd7c8a526c950b658f4d3ccg",
        InvalidHashEncodingError,
    ),
    "whitespace only": (" " * 40, InvalidHashEncodingError),
}


@pytest.mark.parametrize("value", list(VALID.values()), ids=list(VALID))
def test_new_hash_valid(value):
    h = new_hash(value)
    assert h == Hash(bytes.fromhex(value))
    assert str(h) == value


@pytest.mark.parametrize(
    "value,error", list(INVALID.values()), ids=list(INVALID)
)
def test_new_hash_invalid(value, error):
    with pytest.raises(error):
        new_hash(value)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        new_hash("abc")


def test_is_zero():
    assert new_hash("0" * 40).is_zero()
    assert new_hash("0" * 64).is_zero()
    assert not new_hash(VALID["correctly encoded SHA-1 hash"]).is_zero()
    assert not Hash(bytes(10)).is_zero()


def test_zero_hash():
    assert ZERO_HASH.is_zero()
    assert str(ZERO_HASH) == "0" * 40
    assert f"{ZERO_HASH}" == "0" * 40


def test_repr_and_length():
    h = new_hash(VALID["correctly encoded SHA-256 hash"])
    assert len(h) == 32
    assert repr(h) == f"Hash('{VALID['correctly encoded SHA-256 hash']}')"
"""Incremental SHA-2 256 hash state built on ``hashlib``."""

from __future__ import annotations

import hashlib

from chksum.digest import Digest

BLOCK_LENGTH_BYTES = 64


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes | bytearray | memoryview:
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


class SHA2_256:
    """Running SHA-2 256 computation.

    ``digest()`` finalizes a copy of the state, so it can be called at any
    point and interleaved with further ``update`` calls.
    """

    __slots__ = ("_inner",)

    def __init__(self) -> None:
        self._inner = hashlib.sha256()

    @classmethod
    def hash(cls, data: bytes | bytearray | memoryview | str) -> Digest:
        """Return the digest of ``data`` in one call."""

        state = cls()
        state.update(data)
        return state.digest()

    def update(self, data: bytes | bytearray | memoryview | str) -> None:
        """Append ``data`` (any length, strings as UTF-8) to the computation."""

        self._inner.update(_as_bytes(data))

    def reset(self) -> None:
        """Discard everything fed so far."""

        self._inner = hashlib.sha256()

    def digest(self) -> Digest:
        return Digest(self._inner.copy().digest())

    def copy(self) -> "SHA2_256":
        clone = SHA2_256.__new__(SHA2_256)
        clone._inner = self._inner.copy()
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SHA2_256):
            return NotImplemented
        return self.digest() == other.digest()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SHA2_256(digest={self.digest().to_hex_lowercase()!r})"


def new() -> SHA2_256:
    """Create a fresh hash state."""

    return SHA2_256()


def default() -> SHA2_256:
    """Create a fresh hash state; equivalent to :func:`new`."""

    return SHA2_256()


__all__ = ["BLOCK_LENGTH_BYTES", "SHA2_256", "default", "new"]

"""Immutable SHA-2 256 digest value and its textual encodings."""

from __future__ import annotations

from functools import total_ordering

DIGEST_LENGTH_BYTES = 32
DIGEST_LENGTH_HEX = DIGEST_LENGTH_BYTES * 2


@total_ordering
class Digest:
    """A 32-byte hash digest.

    Equality, hashing and ordering are byte-wise. The hex encodings are
    derived on demand and ``str(digest)`` is the lowercase form.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes | bytearray | memoryview) -> None:
        data = bytes(raw)
        if len(data) != DIGEST_LENGTH_BYTES:
            raise ValueError(
                f"Digest must be {DIGEST_LENGTH_BYTES} bytes, got {len(data)}."
            )
        object.__setattr__(self, "_raw", data)

    @classmethod
    def from_hex(cls, text: str) -> "Digest":
        """Decode a 64 character hex string in either letter case."""

        candidate = text.strip()
        if len(candidate) != DIGEST_LENGTH_HEX:
            raise ValueError(
                f"Hex digest must be {DIGEST_LENGTH_HEX} characters, got {len(candidate)}."
            )
        return cls(bytes.fromhex(candidate))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Digest is immutable")

    def as_bytes(self) -> bytes:
        return self._raw

    def to_hex_lowercase(self) -> str:
        return self._raw.hex()

    def to_hex_uppercase(self) -> str:
        return self._raw.hex().upper()

    def __bytes__(self) -> bytes:
        return self._raw

    def __len__(self) -> int:
        return DIGEST_LENGTH_BYTES

    def __str__(self) -> str:
        return self.to_hex_lowercase()

    def __repr__(self) -> str:
        return f"Digest({self.to_hex_lowercase()!r})"

    def __format__(self, format_spec: str) -> str:
        if format_spec == "x":
            return self.to_hex_lowercase()
        if format_spec == "X":
            return self.to_hex_uppercase()
        return format(str(self), format_spec)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Digest):
            return NotImplemented
        return self._raw == other._raw

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Digest):
            return NotImplemented
        return self._raw < other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __copy__(self) -> "Digest":
        return self

    def __deepcopy__(self, memo: dict) -> "Digest":
        return self

    def __reduce__(self):
        return (Digest, (self._raw,))


__all__ = ["DIGEST_LENGTH_BYTES", "DIGEST_LENGTH_HEX", "Digest"]

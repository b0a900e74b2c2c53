"""Capability protocols used by the dispatch layer."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from chksum.sha2_256 import SHA2_256


@runtime_checkable
class SupportsRead(Protocol):
    """Byte sources exposing a ``read(size)`` method (sync or async)."""

    def read(self, size: int = ..., /) -> Any:
        ...


@runtime_checkable
class SupportsWrite(Protocol):
    """Byte sinks exposing a ``write(data)`` method (sync or async)."""

    def write(self, data: Any, /) -> Any:
        ...


@runtime_checkable
class Hashable(Protocol):
    """In-memory values that can feed themselves into a hash state."""

    def hash_into(self, state: SHA2_256) -> None:
        """Update ``state`` with the value's bytes; never fails."""
        ...


@runtime_checkable
class Chksumable(Protocol):
    """Values that feed a hash state and may fail with ``OSError``."""

    def chksum_into(self, state: SHA2_256) -> None:
        """Update ``state`` with the value's bytes, raising ``OSError`` on I/O failure."""
        ...


@runtime_checkable
class AsyncChksumable(Protocol):
    """Async counterpart of :class:`Chksumable`."""

    async def async_chksum_into(self, state: SHA2_256) -> None:
        ...


__all__ = ["AsyncChksumable", "Chksumable", "Hashable", "SupportsRead", "SupportsWrite"]

"""Readers that hash data on the fly as it is read through them.

Example::

    with open(path, "rb") as handle:
        source = reader.new(handle)
        payload = source.read()
    source.digest().to_hex_lowercase()
"""

from __future__ import annotations

from typing import Any

from chksum.aio import maybe_await
from chksum.digest import Digest
from chksum.sha2_256 import SHA2_256


class Reader:
    """Pass-through wrapper over a blocking byte source.

    Every non-empty read updates the hash before it is returned, so
    ``digest()`` reflects exactly what the caller has observed. No data is
    read ahead or buffered.
    """

    def __init__(self, inner: Any, state: SHA2_256 | None = None) -> None:
        self.inner = inner
        self._state = state if state is not None else SHA2_256()

    def _observe(self, data: Any) -> Any:
        if data:
            self._state.update(data)
        return data

    def read(self, size: int = -1) -> Any:
        return self._observe(self.inner.read(size))

    def readline(self, size: int = -1) -> Any:
        return self._observe(self.inner.readline(size))

    def readinto(self, buffer: Any) -> int | None:
        count = self.inner.readinto(buffer)
        if count:
            self._state.update(memoryview(buffer).cast("B")[:count])
        return count

    def readable(self) -> bool:
        return True

    def __iter__(self) -> "Reader":
        return self

    def __next__(self) -> Any:
        line = self.readline()
        if not line:
            raise StopIteration
        return line

    def close(self) -> None:
        self.inner.close()

    @property
    def closed(self) -> bool:
        return bool(getattr(self.inner, "closed", False))

    def __enter__(self) -> "Reader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def digest(self) -> Digest:
        return self._state.digest()


class AsyncReader:
    """Pass-through wrapper over an asynchronous byte source.

    ``inner.read`` may be a coroutine (``anyio.AsyncFile``,
    ``asyncio.StreamReader``) or a plain method.
    """

    def __init__(self, inner: Any, state: SHA2_256 | None = None) -> None:
        self.inner = inner
        self._state = state if state is not None else SHA2_256()

    def _observe(self, data: Any) -> Any:
        if data:
            self._state.update(data)
        return data

    async def read(self, size: int = -1) -> Any:
        return self._observe(await maybe_await(self.inner.read(size)))

    async def readline(self) -> Any:
        return self._observe(await maybe_await(self.inner.readline()))

    def __aiter__(self) -> "AsyncReader":
        return self

    async def __anext__(self) -> Any:
        line = await self.readline()
        if not line:
            raise StopAsyncIteration
        return line

    async def aclose(self) -> None:
        closer = getattr(self.inner, "aclose", None) or self.inner.close
        await maybe_await(closer())

    async def __aenter__(self) -> "AsyncReader":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def digest(self) -> Digest:
        return self._state.digest()


def new(inner: Any) -> Reader:
    """Create a :class:`Reader` with a fresh hash state."""
    return Reader(inner)


def with_hash(inner: Any, state: SHA2_256) -> Reader:
    """Create a :class:`Reader` continuing from ``state``."""
    return Reader(inner, state)


def async_new(inner: Any) -> AsyncReader:
    return AsyncReader(inner)


def async_with_hash(inner: Any, state: SHA2_256) -> AsyncReader:
    return AsyncReader(inner, state)


__all__ = ["AsyncReader", "Reader", "async_new", "async_with_hash", "new", "with_hash"]

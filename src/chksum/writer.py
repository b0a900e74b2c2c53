"""Writers that hash data on the fly as it is written through them.

Only bytes the inner sink actually accepted are hashed: when ``write``
reports a short count, the rejected tail is left out of the digest.
"""

from __future__ import annotations

import inspect
import io
from typing import Any

from chksum.aio import maybe_await
from chksum.digest import Digest
from chksum.dispatch import as_buffer
from chksum.sha2_256 import SHA2_256


def _accepted(inner: Any, data: Any, written: int | None) -> Any:
    """Return the prefix of ``data`` the sink reported as written."""

    if not isinstance(data, (bytes, bytearray, str)):
        # Counts are in bytes, whatever the item size of the buffer.
        data = as_buffer(data)
    if written is None:
        # A raw non-blocking sink returns None when it accepted nothing;
        # other sinks (asyncio's StreamWriter) report no count at all.
        return data[:0] if isinstance(inner, io.RawIOBase) else data
    return data[:written]


class Writer:
    """Pass-through wrapper over a blocking byte sink."""

    def __init__(self, inner: Any, state: SHA2_256 | None = None) -> None:
        self.inner = inner
        self._state = state if state is not None else SHA2_256()

    def write(self, data: Any) -> int | None:
        written = self.inner.write(data)
        accepted = _accepted(self.inner, data, written)
        if accepted:
            self._state.update(accepted)
        return written

    def writelines(self, lines: Any) -> None:
        for line in lines:
            self.write(line)

    def writable(self) -> bool:
        return True

    def flush(self) -> None:
        self.inner.flush()

    def close(self) -> None:
        self.inner.close()

    @property
    def closed(self) -> bool:
        return bool(getattr(self.inner, "closed", False))

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def digest(self) -> Digest:
        return self._state.digest()


class AsyncWriter:
    """Pass-through wrapper over an asynchronous byte sink.

    Works with sinks whose ``write`` is a coroutine (``anyio.AsyncFile``)
    and with buffered sinks such as ``asyncio.StreamWriter``, which are
    drained after each write.
    """

    def __init__(self, inner: Any, state: SHA2_256 | None = None) -> None:
        self.inner = inner
        self._state = state if state is not None else SHA2_256()

    async def write(self, data: Any) -> int | None:
        result = self.inner.write(data)
        if inspect.isawaitable(result):
            written = await result
        else:
            written = result
            drain = getattr(self.inner, "drain", None)
            if drain is not None:
                await drain()
        accepted = _accepted(self.inner, data, written)
        if accepted:
            self._state.update(accepted)
        return written

    async def flush(self) -> None:
        flush = getattr(self.inner, "flush", None)
        if flush is not None:
            await maybe_await(flush())

    async def aclose(self) -> None:
        closer = getattr(self.inner, "aclose", None) or self.inner.close
        await maybe_await(closer())
        wait_closed = getattr(self.inner, "wait_closed", None)
        if wait_closed is not None:
            await wait_closed()

    async def __aenter__(self) -> "AsyncWriter":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def digest(self) -> Digest:
        return self._state.digest()


def new(inner: Any) -> Writer:
    """Create a :class:`Writer` with a fresh hash state."""
    return Writer(inner)


def with_hash(inner: Any, state: SHA2_256) -> Writer:
    """Create a :class:`Writer` continuing from ``state``."""
    return Writer(inner, state)


def async_new(inner: Any) -> AsyncWriter:
    return AsyncWriter(inner)


def async_with_hash(inner: Any, state: SHA2_256) -> AsyncWriter:
    return AsyncWriter(inner, state)


__all__ = ["AsyncWriter", "Writer", "async_new", "async_with_hash", "new", "with_hash"]

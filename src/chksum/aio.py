"""Asynchronous dispatch of chksumable inputs on top of ``anyio``.

Mirrors :mod:`chksum.dispatch`: same entry classification, same ordering
and failure semantics. Suspension happens only at I/O boundaries (stat,
directory enumeration, file open, chunked reads); hash updates never
yield to the event loop.
"""

from __future__ import annotations

import inspect
import io
import os
from collections.abc import AsyncIterable, Iterable
from functools import singledispatch
from typing import Any

import anyio
import anyio.to_thread

from chksum.config.models import TraversalConfig
from chksum.digest import Digest
from chksum.dispatch import (
    DEFAULT_TRAVERSAL,
    EntryKind,
    classify,
    feed,
    as_buffer,
    as_entry,
    handle_special,
    hash_into,
    loop_error,
)
from chksum.errors import IoError
from chksum.sha2_256 import SHA2_256
from chksum.util.typing import AsyncChksumable, Chksumable, Hashable, SupportsRead

_EXHAUSTED = object()


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""

    if inspect.isawaitable(value):
        return await value
    return value


@singledispatch
async def async_chksum_into(
    data: Any, state: SHA2_256, traversal: TraversalConfig | None = None
) -> None:
    """Feed ``data`` into ``state`` asynchronously, raising ``OSError`` on I/O failure."""

    traversal = traversal or DEFAULT_TRAVERSAL
    if isinstance(data, AsyncChksumable):
        await data.async_chksum_into(state)
    elif isinstance(data, Chksumable):
        await anyio.to_thread.run_sync(data.chksum_into, state)
    elif isinstance(data, Hashable):
        data.hash_into(state)
    elif isinstance(data, SupportsRead):
        await _consume_stream(data, state, traversal)
    elif as_buffer(data) is not None:
        hash_into(data, state)
    elif isinstance(data, AsyncIterable):
        async for entry in data:
            await _consume_entry(entry, state, traversal, frozenset())
    elif isinstance(data, Iterable):
        iterator = iter(data)
        while True:
            entry = await anyio.to_thread.run_sync(next, iterator, _EXHAUSTED)
            if entry is _EXHAUSTED:
                break
            await _consume_entry(entry, state, traversal, frozenset())
    else:
        raise TypeError(f"Cannot compute a checksum of {type(data).__name__!r}.")


@async_chksum_into.register(bytes)
@async_chksum_into.register(bytearray)
@async_chksum_into.register(memoryview)
@async_chksum_into.register(str)
@async_chksum_into.register(Digest)
async def _chksum_in_memory(
    data: Any, state: SHA2_256, traversal: TraversalConfig | None = None
) -> None:
    hash_into(data, state)


@async_chksum_into.register(os.PathLike)
async def _chksum_path(
    data: os.PathLike, state: SHA2_256, traversal: TraversalConfig | None = None
) -> None:
    traversal = traversal or DEFAULT_TRAVERSAL
    target = anyio.Path(data)
    status = await target.stat()
    if classify(status) is EntryKind.DIRECTORY:
        await _consume_directory(target, status, state, traversal, frozenset())
        return
    async with await anyio.open_file(target, "rb") as handle:
        await _read_chunks(handle, state, traversal)


async def _read_chunks(stream: Any, state: SHA2_256, traversal: TraversalConfig) -> None:
    while feed(state, await maybe_await(stream.read(traversal.chunk_size))):
        pass


async def _consume_stream(stream: Any, state: SHA2_256, traversal: TraversalConfig) -> None:
    if isinstance(stream, io.IOBase):
        # Blocking file objects are read in a worker thread.
        stream = anyio.wrap_file(stream)
    await _read_chunks(stream, state, traversal)


async def _consume_directory(
    path: anyio.Path,
    status: os.stat_result,
    state: SHA2_256,
    traversal: TraversalConfig,
    ancestors: frozenset[tuple[int, int]],
) -> None:
    identity = (status.st_dev, status.st_ino)
    if identity in ancestors:
        raise loop_error(path)
    nested = ancestors | {identity}
    async for entry in path.iterdir():
        await _consume_entry(entry, state, traversal, nested)


async def _consume_entry(
    entry: Any,
    state: SHA2_256,
    traversal: TraversalConfig,
    ancestors: frozenset[tuple[int, int]],
) -> None:
    target = anyio.Path(os.fsdecode(as_entry(entry)))
    status = await target.stat()
    kind = classify(status)
    if kind is EntryKind.FILE:
        async with await anyio.open_file(target, "rb") as handle:
            await _read_chunks(handle, state, traversal)
    elif kind is EntryKind.DIRECTORY:
        await _consume_directory(target, status, state, traversal, ancestors)
    else:
        handle_special(entry, traversal)


async def async_chksum(data: Any, *, traversal: TraversalConfig | None = None) -> Digest:
    """Return the digest of ``data``, raising :class:`IoError` on I/O failure."""

    state = SHA2_256()
    try:
        await async_chksum_into(data, state, traversal)
    except OSError as exc:
        raise IoError(exc) from exc
    return state.digest()


__all__ = ["async_chksum", "async_chksum_into", "maybe_await"]

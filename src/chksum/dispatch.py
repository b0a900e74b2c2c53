"""Blocking dispatch of hashable and chksumable inputs.

In-memory values (``bytes``, ``bytearray``, ``str``, any other
buffer-protocol object such as ``array.array``, and
:class:`~chksum.digest.Digest`) are fed to the hash state in a single
``update``. Anything that may fail goes through :func:`chksum_into`:

* objects with a ``read`` method are streamed in fixed-size chunks;
  text streams are read as text and encoded as UTF-8,
* paths are ``stat``-ed; directories are traversed, everything else is
  opened and streamed,
* other iterables (such as ``os.scandir`` iterators) are treated as the
  entries of an already-open directory and must yield paths.

Directory entries are visited in the order the filesystem enumerates
them and all regular-file contents go into the same running hash, so the
digest of a directory equals the digest of the concatenated file bytes.
Symlinks are followed. Entries that are neither files nor directories
are skipped, or rejected when ``TraversalConfig.special_files`` is
``"error"``.
"""

from __future__ import annotations

import errno
import logging
import os
import stat
import sys
from collections.abc import Iterable
from enum import Enum
from functools import singledispatch
from typing import Any, BinaryIO

from chksum.config.models import TraversalConfig
from chksum.digest import Digest
from chksum.errors import IoError
from chksum.sha2_256 import SHA2_256
from chksum.util.typing import Chksumable, Hashable, SupportsRead

LOGGER = logging.getLogger(__name__)

DEFAULT_TRAVERSAL = TraversalConfig()


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


def classify(status: os.stat_result) -> EntryKind:
    """Map a (symlink-following) stat result onto the traversal entry kinds."""

    if stat.S_ISREG(status.st_mode):
        return EntryKind.FILE
    if stat.S_ISDIR(status.st_mode):
        return EntryKind.DIRECTORY
    return EntryKind.OTHER


def feed(state: SHA2_256, chunk: bytes | str | None) -> bool:
    """Update ``state`` with one chunk; return ``False`` at end-of-stream."""

    if not chunk:
        return False
    state.update(chunk)
    return True


def as_buffer(data: Any) -> memoryview | None:
    """Return a flat byte view of a buffer-protocol object, or ``None``."""

    try:
        view = memoryview(data)
    except TypeError:
        return None
    if not view.c_contiguous:
        return memoryview(view.tobytes())
    return view.cast("B")


def as_entry(entry: Any) -> Any:
    """Check that a directory entry names a path."""

    if isinstance(entry, (str, bytes, os.PathLike)):
        return entry
    raise TypeError(f"Directory entries must be paths, not {type(entry).__name__!r}.")


def handle_special(path: Any, traversal: TraversalConfig) -> None:
    """Apply the special-file policy to a directory entry."""

    if traversal.special_files == "error":
        raise OSError(errno.EINVAL, "Not a regular file or directory", os.fspath(path))
    LOGGER.debug("Skipping special file %s", os.fspath(path))


def loop_error(path: Any) -> OSError:
    return OSError(errno.ELOOP, os.strerror(errno.ELOOP), os.fspath(path))


def stdin() -> BinaryIO:
    """Return the process's standard input as a binary stream."""

    return sys.stdin.buffer


# Hashable


@singledispatch
def hash_into(data: Any, state: SHA2_256) -> None:
    """Feed an in-memory value into ``state``."""

    if isinstance(data, Hashable):
        data.hash_into(state)
        return
    view = as_buffer(data)
    if view is not None:
        state.update(view)
        return
    raise TypeError(
        f"Cannot hash {type(data).__name__!r} in memory; use chksum() for files, paths and streams."
    )


@hash_into.register(bytes)
@hash_into.register(bytearray)
@hash_into.register(str)
def _hash_buffer(data: bytes | bytearray | str, state: SHA2_256) -> None:
    state.update(data)


@hash_into.register(memoryview)
def _hash_view(data: memoryview, state: SHA2_256) -> None:
    state.update(as_buffer(data))


@hash_into.register(Digest)
def _hash_digest(data: Digest, state: SHA2_256) -> None:
    state.update(data.as_bytes())


def hash(data: Any) -> Digest:
    """Return the digest of an in-memory value. Never performs I/O."""

    state = SHA2_256()
    hash_into(data, state)
    return state.digest()


# Chksumable


@singledispatch
def chksum_into(data: Any, state: SHA2_256, traversal: TraversalConfig | None = None) -> None:
    """Feed ``data`` into ``state``, raising ``OSError`` on I/O failure."""

    traversal = traversal or DEFAULT_TRAVERSAL
    if isinstance(data, Chksumable):
        data.chksum_into(state)
    elif isinstance(data, Hashable):
        data.hash_into(state)
    elif isinstance(data, SupportsRead):
        _consume_stream(data, state, traversal)
    elif as_buffer(data) is not None:
        hash_into(data, state)
    elif isinstance(data, Iterable):
        _consume_entries(data, state, traversal, frozenset())
    else:
        raise TypeError(f"Cannot compute a checksum of {type(data).__name__!r}.")


@chksum_into.register(bytes)
@chksum_into.register(bytearray)
@chksum_into.register(memoryview)
@chksum_into.register(str)
@chksum_into.register(Digest)
def _chksum_in_memory(data: Any, state: SHA2_256, traversal: TraversalConfig | None = None) -> None:
    hash_into(data, state)


@chksum_into.register(os.PathLike)
def _chksum_path(data: os.PathLike, state: SHA2_256, traversal: TraversalConfig | None = None) -> None:
    traversal = traversal or DEFAULT_TRAVERSAL
    status = os.stat(data)
    if classify(status) is EntryKind.DIRECTORY:
        _consume_directory(data, status, state, traversal, frozenset())
        return
    # An explicitly named FIFO or device is read like a file.
    with open(data, "rb") as handle:
        _consume_stream(handle, state, traversal)


def _consume_stream(stream: Any, state: SHA2_256, traversal: TraversalConfig) -> None:
    while feed(state, stream.read(traversal.chunk_size)):
        pass


def _consume_directory(
    path: Any,
    status: os.stat_result,
    state: SHA2_256,
    traversal: TraversalConfig,
    ancestors: frozenset[tuple[int, int]],
) -> None:
    identity = (status.st_dev, status.st_ino)
    if identity in ancestors:
        raise loop_error(path)
    with os.scandir(path) as entries:
        _consume_entries(entries, state, traversal, ancestors | {identity})


def _consume_entries(
    entries: Iterable[Any],
    state: SHA2_256,
    traversal: TraversalConfig,
    ancestors: frozenset[tuple[int, int]],
) -> None:
    for entry in entries:
        entry = as_entry(entry)
        status = os.stat(entry)
        kind = classify(status)
        if kind is EntryKind.FILE:
            with open(entry, "rb") as handle:
                _consume_stream(handle, state, traversal)
        elif kind is EntryKind.DIRECTORY:
            _consume_directory(entry, status, state, traversal, ancestors)
        else:
            handle_special(entry, traversal)


def chksum(data: Any, *, traversal: TraversalConfig | None = None) -> Digest:
    """Return the digest of ``data``, raising :class:`IoError` on I/O failure."""

    state = SHA2_256()
    try:
        chksum_into(data, state, traversal)
    except OSError as exc:
        raise IoError(exc) from exc
    return state.digest()


__all__ = [
    "DEFAULT_TRAVERSAL",
    "EntryKind",
    "chksum",
    "chksum_into",
    "as_buffer",
    "as_entry",
    "classify",
    "feed",
    "handle_special",
    "hash",
    "hash_into",
    "loop_error",
    "stdin",
]

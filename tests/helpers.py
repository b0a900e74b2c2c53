from __future__ import annotations

import hashlib
import io
import os
from pathlib import Path
from typing import Iterable

EMPTY_HEX = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ABC_HEX = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
EXAMPLE_DATA_HEX = "44752f37272e944fd2c913a35342eaccdd1aaf189bae50676b301ab213fc5061"


def sha256_hex(data: bytes) -> str:
    """Reference digest computed directly with hashlib."""

    return hashlib.sha256(data).hexdigest()


def write_tree(root: Path, files: dict[str, bytes]) -> None:
    """Create files (and parent directories) under ``root``."""

    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


def enumerated_contents(root: Path) -> bytes:
    """Concatenate regular-file contents in ``os.scandir`` order, recursively."""

    parts: list[bytes] = []
    with os.scandir(root) as entries:
        for entry in entries:
            if entry.is_dir():
                parts.append(enumerated_contents(Path(entry.path)))
            elif entry.is_file():
                parts.append(Path(entry.path).read_bytes())
    return b"".join(parts)


class ChunkedSource:
    """Blocking source returning pre-set chunks, one per read."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = list(chunks)
        self.reads: list[int] = []
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        self.reads.append(size)
        if not self._chunks:
            return b""
        return self._chunks.pop(0)

    def readline(self, size: int = -1) -> bytes:
        return self.read(size)

    def close(self) -> None:
        self.closed = True


class AsyncChunkedSource:
    """Asynchronous source returning pre-set chunks, one per read."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = list(chunks)
        self.closed = False

    async def read(self, size: int = -1) -> bytes:
        if not self._chunks:
            return b""
        return self._chunks.pop(0)

    async def readline(self) -> bytes:
        return await self.read()

    async def aclose(self) -> None:
        self.closed = True


class PartialSink(io.RawIOBase):
    """Raw sink accepting at most ``limit`` bytes per write.

    A limit of zero mimics a non-blocking sink that would block and
    returns ``None``.
    """

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit
        self.received = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, data) -> int | None:  # type: ignore[override]
        if self.limit == 0:
            return None
        accepted = bytes(memoryview(data).cast("B")[: self.limit])
        self.received.extend(accepted)
        return len(accepted)


class AsyncMemorySink:
    """Asynchronous sink with a coroutine ``write`` and optional short writes."""

    def __init__(self, limit: int | None = None) -> None:
        self.limit = limit
        self.received = bytearray()
        self.closed = False

    async def write(self, data: bytes) -> int:
        accepted = data if self.limit is None else data[: self.limit]
        self.received.extend(accepted)
        return len(accepted)

    async def aclose(self) -> None:
        self.closed = True


class BufferedStreamSink:
    """Mimics ``asyncio.StreamWriter``: synchronous ``write`` plus ``drain``."""

    def __init__(self) -> None:
        self.received = bytearray()
        self.drains = 0

    def write(self, data: bytes) -> None:
        self.received.extend(data)

    async def drain(self) -> None:
        self.drains += 1

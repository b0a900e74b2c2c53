"""SHA-2 256 checksums of bytes, strings, files, directories and streams."""

from chksum import reader, writer
from chksum.aio import async_chksum
from chksum.digest import Digest
from chksum.dispatch import chksum, hash, stdin
from chksum.errors import ChksumError, IoError
from chksum.reader import AsyncReader, Reader
from chksum.sha2_256 import SHA2_256, default, new
from chksum.util.typing import AsyncChksumable, Chksumable, Hashable
from chksum.writer import AsyncWriter, Writer

__version__ = "0.1.0"

__all__ = [
    "AsyncChksumable",
    "AsyncReader",
    "AsyncWriter",
    "ChksumError",
    "Chksumable",
    "Digest",
    "Hashable",
    "IoError",
    "Reader",
    "SHA2_256",
    "Writer",
    "async_chksum",
    "chksum",
    "default",
    "hash",
    "new",
    "reader",
    "stdin",
    "writer",
]

"""Error types raised by checksum computations."""

from __future__ import annotations


class ChksumError(Exception):
    """Base class for errors raised by the chksum package."""


class IoError(ChksumError):
    """Raised when opening, reading or enumerating an input fails.

    The originating ``OSError`` is kept on ``source`` and chained as the
    exception cause. No partial digest is ever returned alongside it.
    """

    def __init__(self, source: OSError) -> None:
        super().__init__(str(source))
        self.source = source

    @property
    def errno(self) -> int | None:
        return self.source.errno

    @property
    def filename(self) -> object:
        return self.source.filename


__all__ = ["ChksumError", "IoError"]

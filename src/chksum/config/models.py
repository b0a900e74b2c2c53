"""Pydantic models describing chksum configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CHUNK_SIZE = 8192


class TraversalConfig(BaseModel):
    """Stream chunking and directory-entry policy for checksum traversal."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)
    special_files: Literal["skip", "error"] = "skip"


class LoggingConfig(BaseModel):
    """Logging handler settings used by the CLI."""

    model_config = ConfigDict(extra="allow")

    level: str = "INFO"
    log_path: Optional[Path] = None

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown logging level '{value}'.")
        return level


class FetchConfig(BaseModel):
    """Download policy for verified fetches."""

    model_config = ConfigDict(extra="allow")

    timeout_seconds: int = Field(default=30, ge=1)
    retries: int = Field(default=3, ge=0)
    backoff_seconds: float = Field(default=1.0, ge=0)
    manifest_extension: str = ".sha256"


class ChksumConfig(BaseModel):
    """Root configuration object."""

    model_config = ConfigDict(extra="allow")

    traversal: TraversalConfig = Field(default_factory=TraversalConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ChksumConfig",
    "FetchConfig",
    "LoggingConfig",
    "TraversalConfig",
]

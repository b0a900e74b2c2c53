"""Verified downloads: the body is hashed while it is written to disk."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import requests

from chksum import writer
from chksum.digest import Digest
from chksum.util.retry import retry

LOGGER = logging.getLogger(__name__)

DEFAULT_HEADERS: Mapping[str, str] = {
    "User-Agent": "chksum/0.1 (+https://pypi.org/project/chksum-sha2-256/)",
    "Accept": "*/*",
}

CHUNK_SIZE = 8192


def manifest_path_for(dest: Path, manifest_extension: str = ".sha256") -> Path:
    """Return the sidecar manifest path for ``dest``."""
    return dest.with_suffix(dest.suffix + manifest_extension)


def fetch_file(
    url: str,
    dest: Path,
    *,
    timeout_seconds: float | None = None,
    retries: int = 0,
    backoff_seconds: float = 1.0,
    expected_hash: str | None = None,
    manifest_extension: str = ".sha256",
    headers: Mapping[str, str] | None = None,
) -> Digest:
    """Download ``url`` to ``dest`` and return the digest of the body.

    The body is streamed through a hashing :class:`~chksum.writer.Writer`
    into ``<dest>.download`` and moved into place once complete; the
    lowercase hex digest is stored next to it in a sidecar manifest. A
    mismatch against ``expected_hash`` raises ``ValueError`` after the
    manifest is written. Nothing is downloaded when ``dest`` is already
    up to date according to its manifest.
    """
    expected = Digest.from_hex(expected_hash) if expected_hash else None

    stored = stored_digest(dest, manifest_extension)
    if stored is not None and (expected is None or stored == expected):
        LOGGER.info("Skipping download, %s is up to date", dest)
        return stored

    dest.parent.mkdir(parents=True, exist_ok=True)

    def _download() -> Digest:
        merged_headers = dict(DEFAULT_HEADERS)
        if headers:
            merged_headers.update(headers)

        LOGGER.info("Fetching %s -> %s", url, dest)
        response = requests.get(
            url,
            stream=True,
            timeout=timeout_seconds,
            headers=merged_headers,
        )
        if response.status_code == 404:
            raise FileNotFoundError(f"Source not found at {url}")
        response.raise_for_status()

        tmp_path = dest.with_suffix(dest.suffix + ".download")
        try:
            with tmp_path.open("wb") as handle:
                sink = writer.new(handle)
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        sink.write(chunk)
            tmp_path.replace(dest)
        finally:
            tmp_path.unlink(missing_ok=True)

        digest = sink.digest()
        manifest_path_for(dest, manifest_extension).write_text(digest.to_hex_lowercase(), encoding="utf-8")

        if expected is not None and digest != expected:
            LOGGER.warning("Hash mismatch for %s: expected %s, got %s", dest.name, expected, digest)
            raise ValueError(f"Downloaded hash mismatch for {dest.name}")

        return digest

    # ``retries`` counts the attempts made after the first one.
    return retry(
        _download,
        attempts=retries + 1,
        backoff_seconds=backoff_seconds,
        retry_on=(requests.RequestException, ValueError),
    )


def stored_digest(dest: Path, manifest_extension: str = ".sha256") -> Digest | None:
    """Return the digest recorded next to ``dest``, if both files are usable."""
    manifest = manifest_path_for(dest, manifest_extension)
    if not (dest.exists() and manifest.exists()):
        return None
    try:
        return Digest.from_hex(manifest.read_text(encoding="utf-8"))
    except ValueError:
        LOGGER.warning("Ignoring malformed manifest %s", manifest)
        return None


def file_needs_refresh(
    dest: Path, *, expected_hash: Optional[str] = None, manifest_extension: str = ".sha256"
) -> bool:
    """Tell whether ``dest`` is missing or its manifest disagrees with ``expected_hash``."""
    stored = stored_digest(dest, manifest_extension)
    if stored is None:
        return True
    return bool(expected_hash) and stored != Digest.from_hex(expected_hash)


__all__ = ["fetch_file", "file_needs_refresh", "manifest_path_for", "stored_digest"]

"""Command-line entry points for chksum."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import requests
import typer

from chksum.config import ChksumConfig, ConfigError, dump_example_config, load_config
from chksum.digest import Digest
from chksum.dispatch import chksum, stdin
from chksum.errors import IoError
from chksum.io.fetcher import fetch_file
from chksum.util.logging import configure_logging

app = typer.Typer(add_completion=False, help="SHA-2 256 checksums of files, directories and streams")

STDIN_MARKER = "-"


def _setup(config_path: Optional[Path]) -> tuple[ChksumConfig, logging.Logger]:
    try:
        cfg = load_config(config_path)
    except ConfigError as exc:
        typer.echo(f"chksum: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    logger = configure_logging(level=cfg.logging.level, log_path=cfg.logging.log_path)
    return cfg, logger


def _parse_manifest_line(line: str) -> tuple[str, str] | None:
    """Split a ``<hex>  <path>`` line; ``*`` before the path marks binary mode."""

    stripped = line.rstrip("\n")
    if not stripped.strip() or stripped.lstrip().startswith("#"):
        return None
    hex_digest, sep, name = stripped.partition(" ")
    if not sep:
        raise ValueError(f"Malformed manifest line: {line!r}")
    name = name[1:] if name[:1] in {" ", "*"} else name
    return hex_digest, name


@app.command("sum")
def sum_command(
    paths: List[str] = typer.Argument(..., help="Files or directories to checksum; '-' reads stdin"),
    uppercase: bool = typer.Option(False, "--uppercase", "-u", help="Print uppercase hex"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file (YAML/TOML/JSON)"),
) -> None:
    """Print the digest of each file, directory or stdin."""

    cfg, logger = _setup(config_path)

    failed = False
    for item in paths:
        source = stdin() if item == STDIN_MARKER else Path(item)
        try:
            digest = chksum(source, traversal=cfg.traversal)
        except IoError as exc:
            logger.debug("Checksum failed for %s", item, exc_info=exc)
            typer.echo(f"chksum: {item}: {exc}", err=True)
            failed = True
            continue
        text = f"{digest:X}" if uppercase else f"{digest:x}"
        typer.echo(f"{text}  {item}")

    if failed:
        raise typer.Exit(code=1)


@app.command()
def check(
    manifest: Path = typer.Argument(..., help="File of '<hex>  <path>' lines"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file (YAML/TOML/JSON)"),
) -> None:
    """Verify digests listed in a manifest."""

    cfg, logger = _setup(config_path)

    try:
        lines = manifest.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        typer.echo(f"chksum: {manifest}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    base = manifest.parent
    failures = 0
    for line in lines:
        try:
            parsed = _parse_manifest_line(line)
            if parsed is None:
                continue
            hex_digest, name = parsed
            expected = Digest.from_hex(hex_digest)
        except ValueError as exc:
            typer.echo(f"chksum: {manifest}: {exc}", err=True)
            failures += 1
            continue

        target = Path(name)
        if not target.is_absolute():
            target = base / target
        try:
            actual = chksum(target, traversal=cfg.traversal)
        except IoError as exc:
            typer.echo(f"{name}: FAILED open or read")
            typer.echo(f"chksum: {name}: {exc}", err=True)
            failures += 1
            continue

        if actual == expected:
            typer.echo(f"{name}: OK")
        else:
            logger.debug("Mismatch for %s: expected %s, got %s", name, expected, actual)
            typer.echo(f"{name}: FAILED")
            failures += 1

    if failures:
        typer.echo(f"chksum: WARNING: {failures} entries did not match", err=True)
        raise typer.Exit(code=1)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL to download"),
    dest: Path = typer.Argument(..., help="Destination file"),
    expected: Optional[str] = typer.Option(None, "--expected", help="Expected hex digest"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file (YAML/TOML/JSON)"),
) -> None:
    """Download a file, hashing it on the fly, and verify it."""

    cfg, _ = _setup(config_path)
    policy = cfg.fetch
    try:
        digest = fetch_file(
            url,
            dest,
            timeout_seconds=policy.timeout_seconds,
            retries=policy.retries,
            backoff_seconds=policy.backoff_seconds,
            expected_hash=expected,
            manifest_extension=policy.manifest_extension,
        )
    except (FileNotFoundError, ValueError, requests.RequestException) as exc:
        typer.echo(f"chksum: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"{digest}  {dest}")


@app.command("dump-config")
def dump_config(dest: Path = typer.Argument(..., help="Destination (.yaml or .json)")) -> None:
    """Write the default configuration to a file."""

    try:
        dump_example_config(dest)
    except ConfigError as exc:
        typer.echo(f"chksum: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    typer.echo(f"Wrote {dest}")


def main() -> None:
    app()


__all__ = ["main", "app"]

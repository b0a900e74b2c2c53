from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from chksum import cli

from tests.helpers import EMPTY_HEX, EXAMPLE_DATA_HEX, enumerated_contents, sha256_hex, write_tree


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    monkeypatch.delenv("CHKSUM_CHUNK_SIZE", raising=False)
    monkeypatch.delenv("CHKSUM_SPECIAL_FILES", raising=False)
    yield
    logger = logging.getLogger("chksum")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def test_sum_prints_digest_per_argument(tmp_path: Path) -> None:
    write_tree(tmp_path / "tree", {"a.txt": b"example ", "b.txt": b"data"})
    (tmp_path / "file.txt").write_bytes(b"example data")
    (tmp_path / "empty").mkdir()

    runner = CliRunner()
    result = runner.invoke(
        cli.app,
        ["sum", str(tmp_path / "file.txt"), str(tmp_path / "tree"), str(tmp_path / "empty")],
    )

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == f"{EXAMPLE_DATA_HEX}  {tmp_path / 'file.txt'}"
    assert lines[1] == f"{sha256_hex(enumerated_contents(tmp_path / 'tree'))}  {tmp_path / 'tree'}"
    assert lines[2] == f"{EMPTY_HEX}  {tmp_path / 'empty'}"


def test_sum_uppercase_and_stdin() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.app, ["sum", "--uppercase", "-"], input=b"example data")

    assert result.exit_code == 0, result.output
    assert f"{EXAMPLE_DATA_HEX.upper()}  -" in result.stdout


def test_sum_reports_failures_and_continues(tmp_path: Path) -> None:
    (tmp_path / "ok.txt").write_bytes(b"example data")

    runner = CliRunner()
    result = runner.invoke(cli.app, ["sum", str(tmp_path / "missing"), str(tmp_path / "ok.txt")])

    assert result.exit_code == 1
    assert f"{EXAMPLE_DATA_HEX}  {tmp_path / 'ok.txt'}" in result.stdout


def test_sum_respects_config_file(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(yaml.safe_dump({"traversal": {"chunk_size": 2}}), encoding="utf-8")
    (tmp_path / "file.txt").write_bytes(b"example data")

    runner = CliRunner()
    result = runner.invoke(cli.app, ["sum", "--config", str(config), str(tmp_path / "file.txt")])

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith(EXAMPLE_DATA_HEX)


def test_sum_rejects_invalid_config(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("traversal:\n  chunk_size: 0\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli.app, ["sum", "--config", str(config), "-"], input=b"")

    assert result.exit_code == 2


def test_check_verifies_manifest(tmp_path: Path) -> None:
    (tmp_path / "good.txt").write_bytes(b"example data")
    (tmp_path / "bad.txt").write_bytes(b"tampered")
    manifest = tmp_path / "SHA256SUMS"
    manifest.write_text(
        "\n".join(
            [
                "# generated",
                f"{EXAMPLE_DATA_HEX}  good.txt",
                f"{EXAMPLE_DATA_HEX.upper()} *bad.txt",
                f"{EMPTY_HEX}  missing.txt",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    runner = CliRunner()
    result = runner.invoke(cli.app, ["check", str(manifest)])

    assert result.exit_code == 1
    assert "good.txt: OK" in result.stdout
    assert "bad.txt: FAILED" in result.stdout
    assert "missing.txt: FAILED open or read" in result.stdout


def test_check_all_ok(tmp_path: Path) -> None:
    write_tree(tmp_path / "tree", {"x": b"example data"})
    manifest = tmp_path / "sums.txt"
    manifest.write_text(f"{EXAMPLE_DATA_HEX}  tree\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli.app, ["check", str(manifest)])

    assert result.exit_code == 0, result.output
    assert "tree: OK" in result.stdout


def test_fetch_command_uses_config_policy(tmp_path: Path) -> None:
    dest = tmp_path / "download.bin"

    with patch("chksum.cli.fetch_file") as fetcher:
        fetcher.return_value = cli.Digest.from_hex(EXAMPLE_DATA_HEX)
        runner = CliRunner()
        result = runner.invoke(
            cli.app, ["fetch", "http://example.com/f", str(dest), "--expected", EXAMPLE_DATA_HEX]
        )

    assert result.exit_code == 0, result.output
    assert f"{EXAMPLE_DATA_HEX}  {dest}" in result.stdout
    kwargs = fetcher.call_args.kwargs
    assert kwargs["expected_hash"] == EXAMPLE_DATA_HEX
    assert kwargs["retries"] == 3
    assert kwargs["manifest_extension"] == ".sha256"


def test_fetch_command_reports_mismatch(tmp_path: Path) -> None:
    with patch("chksum.cli.fetch_file", side_effect=ValueError("Downloaded hash mismatch for f")):
        runner = CliRunner()
        result = runner.invoke(cli.app, ["fetch", "http://example.com/f", str(tmp_path / "f")])

    assert result.exit_code == 1


def test_dump_config(tmp_path: Path) -> None:
    dest = tmp_path / "chksum.yaml"

    runner = CliRunner()
    result = runner.invoke(cli.app, ["dump-config", str(dest)])

    assert result.exit_code == 0, result.output
    assert yaml.safe_load(dest.read_text(encoding="utf-8"))["traversal"]["special_files"] == "skip"

    result = runner.invoke(cli.app, ["dump-config", str(tmp_path / "chksum.toml")])
    assert result.exit_code == 2

"""Tests for the root sdui CLI."""

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sdui import __version__
from sdui.cli import cli
from tests.conftest import write_json


@pytest.fixture(autouse=True)
def _cwd(_isolated_cwd: None) -> None:
    """Every test runs without a discoverable sdui.toml."""


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "sdui" in result.output
    for command in ("render", "patch", "check"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


def test_invalid_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    bad = tmp_path / "bad.toml"
    bad.write_text("[resolver\n")
    result = cli_runner.invoke(cli, ["-c", str(bad), "check", "packet.json"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.stderr


def test_discovered_config_is_applied(
    cli_runner: CliRunner, tmp_path: Path, packet_data: dict[str, Any]
) -> None:
    (tmp_path / "sdui.toml").write_text("[plugins]\nenabled = false\n[resolver]\nheuristic_references = false\n")
    packet_data["layout"]["nodes"][0]["type"] = "Stack"
    packet = write_json(tmp_path / "packet.json", packet_data)
    result = cli_runner.invoke(cli, ["--json", "render", str(packet)])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["data"]["node_count"] == 1

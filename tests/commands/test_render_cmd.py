"""Tests for the render CLI command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sdui.cli import cli
from tests.conftest import state_update, write_json


@pytest.fixture
def files(tmp_path: Path, packet_data: dict[str, Any], catalog_data: dict[str, Any]) -> dict[str, str]:
    return {
        "packet": str(write_json(tmp_path / "packet.json", packet_data)),
        "catalog": str(write_json(tmp_path / "catalog.json", catalog_data)),
    }


@pytest.mark.usefixtures("_isolated_cwd")
class TestRenderCommand:
    def test_human_output(self, cli_runner: CliRunner, files: dict[str, str]) -> None:
        result = cli_runner.invoke(cli, ["render", files["packet"], "--catalog", files["catalog"]])
        assert result.exit_code == 0
        assert "OK  resolve" in result.stdout
        assert 'text: "Hi, Alice!"' in result.stdout

    def test_json_output(self, cli_runner: CliRunner, files: dict[str, str]) -> None:
        result = cli_runner.invoke(cli, ["--json", "render", files["packet"]])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["data"]["node_count"] == 3

    def test_quiet_output(self, cli_runner: CliRunner, files: dict[str, str]) -> None:
        result = cli_runner.invoke(cli, ["-q", "render", files["packet"], "--root", "status"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "status"

    def test_state_updates_applied_in_order(
        self, cli_runner: CliRunner, files: dict[str, str], tmp_path: Path
    ) -> None:
        first = write_json(
            tmp_path / "u1.json",
            state_update({"op": "patch", "patch": {"op": "replace", "path": "/user/name", "value": "Bob"}}),
        )
        second = write_json(
            tmp_path / "u2.json",
            state_update({"op": "patch", "patch": {"op": "replace", "path": "/user/name", "value": "Cy"}}),
        )
        result = cli_runner.invoke(
            cli,
            ["--json", "render", files["packet"], "--state-update", str(first), "--state-update", str(second)],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        greeting = data["data"]["tree"]["children"]["children"][0]
        assert greeting["properties"]["text"] == "Hi, Cy!"
        assert data["meta"]["state_version"] == 2

    def test_malformed_state_update(
        self, cli_runner: CliRunner, files: dict[str, str], tmp_path: Path
    ) -> None:
        bad = write_json(tmp_path / "bad.json", {"operations": [{"op": "nope"}]})
        result = cli_runner.invoke(cli, ["render", files["packet"], "--state-update", str(bad)])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "apply_state" in result.stderr

    def test_cyclical_layout_fails(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        packet = write_json(
            tmp_path / "loop.json",
            {"layout": {"root": "a", "nodes": [{"id": "a", "type": "Container", "properties": {"child": "a"}}]}},
        )
        result = cli_runner.invoke(cli, ["--json", "render", str(packet)])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert json.loads(result.stderr)["error"]["code"] == "CYCLICAL_LAYOUT"

    def test_malformed_packet(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        packet = tmp_path / "broken.json"
        packet.write_text("{not json")
        result = cli_runner.invoke(cli, ["render", str(packet)])
        assert result.exit_code == 1
        assert "ERROR  load" in result.stderr

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["render", str(tmp_path / "absent.json")])
        assert result.exit_code == 2

"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from sdui.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--examples"], ["sdui render packet.json --catalog catalog.json"]),
    (["render", "--examples"], ["--state-update update.json", "--root sidebar"]),
    (["check", "--examples"], ["--errors-only"]),
    (["patch", "--examples"], ["sdui patch state", "sdui patch layout"]),
    (["patch", "state", "--examples"], ["sdui patch state packet.json update.json"]),
    (["patch", "layout", "--examples"], ["-o patched.json"]),
]


@pytest.mark.usefixtures("_isolated_cwd")
@pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
def test_examples(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output


@pytest.mark.usefixtures("_isolated_cwd")
def test_examples_not_in_help_body(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["render", "--help"])
    assert result.exit_code == 0
    assert "--examples" in result.output
    assert "sdui render packet.json --root sidebar" not in result.output

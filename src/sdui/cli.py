"""Root CLI group for sdui with global flags and command registration."""

from __future__ import annotations

import click

from sdui import __version__
from sdui.commands import register_commands
from sdui.commands._base import SduiGroup
from sdui.commands._context import AppContext
from sdui.config.settings import SduiSettings


@click.group(
    cls=SduiGroup,
    invoke_without_command=True,
    examples="""\
  sdui render packet.json --catalog catalog.json
  sdui patch state packet.json update.json -o patched.json
  sdui check packet.json
  sdui --json -c ./sdui.toml render packet.json""",
)
@click.version_option(version=__version__, prog_name="sdui")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """sdui — server-driven UI protocol engine."""
    settings = SduiSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

"""Command: layout integrity and catalog conformance report."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from sdui.commands._base import FILE, SduiCommand, catalog_option
from sdui.config.logging import log_context

if TYPE_CHECKING:
    from sdui.commands._context import AppContext


@click.command(
    cls=SduiCommand,
    examples="""\
  sdui check packet.json
  sdui check packet.json --catalog catalog.json
  sdui check packet.json --errors-only
  sdui --json check packet.json""",
)
@click.argument("packet", type=FILE)
@catalog_option
@click.option("--errors-only", is_flag=True, help="Hide warning-level issues.")
@click.pass_obj
def check(
    app: AppContext,
    packet: Path,
    catalog_path: Path | None,
    errors_only: bool,
) -> None:
    """Report structural problems in PACKET's layout.

    Exits with status 1 when any error-level issue is found.
    """
    from sdui.services.check import SEVERITY_ERROR, CheckService

    with log_context(command="check", packet=str(packet)):
        surface = app.load_surface(packet, catalog_path)
        result = CheckService(surface).check()

    if errors_only:
        issues = [i for i in result.data["issues"] if i["severity"] == SEVERITY_ERROR]
        result = result.model_copy(
            update={"data": {**result.data, "issues": issues, "count": len(issues)}}
        )
    app.emit(result)
    if result.data["errors"]:
        raise SystemExit(1)

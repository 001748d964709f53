"""Command group: apply state and layout updates to a packet."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from sdui.commands._base import FILE, SduiGroup, catalog_option
from sdui.config.logging import log_context

if TYPE_CHECKING:
    from sdui.commands._context import AppContext
    from sdui.infrastructure.surface import Surface
    from sdui.services.result import ServiceResult

_output_option = click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the patched packet here instead of printing it.",
)


@click.group(
    cls=SduiGroup,
    examples="""\
  sdui patch state packet.json update.json
  sdui patch state packet.json update.json -o patched.json
  sdui patch layout packet.json layout-update.json --catalog catalog.json""",
)
def patch() -> None:
    """Apply an update to a packet and print the patched packet."""


@patch.command(
    examples="""\
  sdui patch state packet.json update.json
  sdui --json patch state packet.json update.json""",
)
@click.argument("packet", type=FILE)
@click.argument("update", type=FILE)
@catalog_option
@_output_option
@click.pass_obj
def state(
    app: AppContext,
    packet: Path,
    update: Path,
    catalog_path: Path | None,
    output: Path | None,
) -> None:
    """Apply the StateUpdate in UPDATE to PACKET's state."""
    from sdui.services.patch import PatchService

    with log_context(command="patch state", packet=str(packet), update=str(update)):
        surface = app.load_surface(packet, catalog_path)
        result = PatchService(surface).apply_state(update.read_bytes())
    app.emit(_with_packet(result, surface, output))


@patch.command(
    examples="""\
  sdui patch layout packet.json layout-update.json
  sdui patch layout packet.json layout-update.json -o patched.json""",
)
@click.argument("packet", type=FILE)
@click.argument("update", type=FILE)
@catalog_option
@_output_option
@click.pass_obj
def layout(
    app: AppContext,
    packet: Path,
    update: Path,
    catalog_path: Path | None,
    output: Path | None,
) -> None:
    """Apply the LayoutUpdate in UPDATE to PACKET's node map."""
    from sdui.services.patch import PatchService

    with log_context(command="patch layout", packet=str(packet), update=str(update)):
        surface = app.load_surface(packet, catalog_path)
        result = PatchService(surface).apply_layout(update.read_bytes())
    app.emit(_with_packet(result, surface, output))


def _with_packet(result: ServiceResult, surface: Surface, output: Path | None) -> ServiceResult:
    """Attach the patched packet to a successful result, or write it to *output*."""
    if not result.ok:
        return result
    packet = surface.to_packet()
    if output is not None:
        output.write_text(packet.to_json(indent=2) + "\n", encoding="utf-8")
        data = {**result.data, "output": str(output)}
    else:
        data = {**result.data, "packet": packet.to_wire()}
    return result.model_copy(update={"data": data})

"""Command: resolve a packet's layout and bindings into a tree."""

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
  sdui render packet.json
  sdui render packet.json --catalog catalog.json
  sdui render packet.json --root sidebar
  sdui render packet.json --state-update update.json
  sdui --json render packet.json""",
)
@click.argument("packet", type=FILE)
@catalog_option
@click.option("--root", "root_id", default=None, help="Resolve the subtree under this node id.")
@click.option(
    "--state-update",
    "state_updates",
    type=FILE,
    multiple=True,
    help="StateUpdate file to apply before resolving (repeatable, applied in order).",
)
@click.pass_obj
def render(
    app: AppContext,
    packet: Path,
    catalog_path: Path | None,
    root_id: str | None,
    state_updates: tuple[Path, ...],
) -> None:
    """Resolve PACKET and print the widget tree with bound values."""
    from sdui.services.patch import PatchService
    from sdui.services.render import RenderService

    with log_context(command="render", packet=str(packet)):
        surface = app.load_surface(packet, catalog_path)
        patcher = PatchService(surface)
        for update_path in state_updates:
            result = patcher.apply_state(update_path.read_bytes())
            if not result.ok:
                app.emit(result)
        app.emit(RenderService(surface).resolve(root_id))

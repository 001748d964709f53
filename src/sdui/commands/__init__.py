"""Subcommand modules for sdui.

Provides register_commands() which uses deferred imports to keep
``sdui --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``patch`` group and the standalone commands."""
    from sdui.commands.patch import patch

    cli.add_command(patch)

    from sdui.commands.check import check
    from sdui.commands.render import render

    cli.add_command(render)
    cli.add_command(check)

"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy plugin loading, Surface construction
from files, and centralized result emission (stdout/stderr routing and
exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from sdui.config.logging import configure_logging
from sdui.domain.errors import MalformedDocumentError
from sdui.output.formatters import OutputSettings, format_result
from sdui.services.result import ServiceResult

if TYPE_CHECKING:
    from sdui.config.settings import SduiSettings
    from sdui.infrastructure.surface import Surface
    from sdui.plugins.manager import PluginManager


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins are discovered on first use so ``--help`` and ``--version``
    never import third-party plugin code.
    """

    def __init__(self, settings: SduiSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager | None:
        """The loaded plugin manager, or None when plugins are disabled."""
        if not self.settings.plugins.enabled:
            return None
        if self._plugins is None:
            from sdui.plugins.manager import PluginManager

            pm = PluginManager()
            local_dir = self.settings.plugins.local_dir
            pm.discover_and_load(local_dir=Path(local_dir) if local_dir else None)
            self._plugins = pm
        return self._plugins

    def load_surface(self, packet_path: Path, catalog_path: Path | None = None) -> Surface:
        """Build a Surface from files, emitting an error result if they are malformed."""
        from sdui.infrastructure.surface import Surface

        try:
            return Surface.from_files(
                packet_path,
                catalog_path=catalog_path,
                config=self.settings,
                plugins=self.plugins,
            )
        except MalformedDocumentError as exc:
            self.emit(ServiceResult.failure("load", exc))
            raise SystemExit(1) from exc

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if settings.quiet and not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

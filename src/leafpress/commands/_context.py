"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``.  Plugins are discovered lazily so ``--help`` never
imports third-party plugin code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from leafpress.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from leafpress.config.settings import LeafSettings
    from leafpress.plugins.manager import PluginManager
    from leafpress.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: LeafSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from leafpress.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from leafpress.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager (discovered lazily on first access)."""
        if self._plugins is None:
            from leafpress.plugins.manager import LOCAL_PLUGIN_DIR, PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(local_dir=self.settings.site_root / LOCAL_PLUGIN_DIR)
        return self._plugins

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr (outside JSON mode).
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

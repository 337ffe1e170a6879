"""Subcommand modules for leafpress.

``register_commands()`` imports command modules lazily so that
``leafpress --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from leafpress.commands.collections import collections
    from leafpress.commands.export import export

    cli.add_command(collections)
    cli.add_command(export)

    # --- Standalone commands ---
    from leafpress.commands.build import build
    from leafpress.commands.lookup import lookup

    cli.add_command(build)
    cli.add_command(lookup)

"""Command group: content exports."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from leafpress.commands._base import LeafGroup

if TYPE_CHECKING:
    from leafpress.commands._context import AppContext


@click.group(
    cls=LeafGroup,
    examples="""\
  leafpress --env prod export search
  leafpress --env prod export search --output algolia.json""",
)
def export() -> None:
    """Export derived content."""


@export.command(
    examples="""\
  leafpress --env prod export search --output dist/algolia.json""",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write records to this file instead of printing them.",
)
@click.pass_obj
def search(app: AppContext, output: Path | None) -> None:
    """Build the search-export records (only produced in the export environment)."""
    from leafpress.services.export import ExportService

    app.emit(ExportService(app.settings, plugins=app.plugins).export_search(output=output))

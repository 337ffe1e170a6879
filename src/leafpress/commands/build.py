"""Command: full site build."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from leafpress.commands._base import LeafCommand

if TYPE_CHECKING:
    from leafpress.commands._context import AppContext


@click.command(
    cls=LeafCommand,
    examples="""\
  leafpress build
  leafpress build --output /tmp/site
  leafpress --env prod build
  leafpress -v build""",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: [dirs] output).",
)
@click.pass_obj
def build(app: AppContext, output: Path | None) -> None:
    """Render every content item and write the site."""
    from leafpress.services.build import BuildService

    app.emit(BuildService(app.settings, plugins=app.plugins).build(output_dir=output))

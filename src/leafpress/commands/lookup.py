"""Command: resolve a slug through the slug index."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from leafpress.commands._base import LeafCommand

if TYPE_CHECKING:
    from leafpress.commands._context import AppContext


@click.command(
    cls=LeafCommand,
    examples="""\
  leafpress lookup fast-load-times
  leafpress --json lookup fast-load-times""",
)
@click.argument("slug")
@click.pass_obj
def lookup(app: AppContext, slug: str) -> None:
    """Show the content item indexed under SLUG."""
    from leafpress.services.query import QueryService

    app.emit(QueryService(app.settings, plugins=app.plugins).lookup(slug))

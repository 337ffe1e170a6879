"""Command group: inspect named collections."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from leafpress.commands._base import LeafGroup

if TYPE_CHECKING:
    from leafpress.commands._context import AppContext


@click.group(
    cls=LeafGroup,
    examples="""\
  leafpress collections list
  leafpress collections show posts
  leafpress --env prod collections show algolia""",
)
def collections() -> None:
    """Inspect the collections a build would produce."""


@collections.command(
    "list",
    examples="""\
  leafpress collections list
  leafpress --json collections list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every collection with its size."""
    from leafpress.services.query import QueryService

    app.emit(QueryService(app.settings, plugins=app.plugins).list_collections())


@collections.command(
    examples="""\
  leafpress collections show recentPosts
  leafpress -q collections show posts""",
)
@click.argument("name")
@click.pass_obj
def show(app: AppContext, name: str) -> None:
    """Show the members of collection NAME, in order."""
    from leafpress.services.query import QueryService

    app.emit(QueryService(app.settings, plugins=app.plugins).show_collection(name))

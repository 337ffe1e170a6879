"""Pluggy hook specifications for leafpress extensions.

Four setup-time hooks let plugins extend a build before rendering starts;
one lifecycle hook runs after the output has been written.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from pathlib import Path

    from leafpress.domain.content import ContentItem
    from leafpress.rendering.registry import Registry
    from leafpress.rendering.site import SiteData

hookspec = pluggy.HookspecMarker("leafpress")
hookimpl = pluggy.HookimplMarker("leafpress")


class LeafpressHookSpec:
    """Hook specifications for the leafpress plugin system."""

    @hookspec
    def register_components(self, registry: Registry, site: SiteData) -> None:
        """Register extra components on *registry*."""

    @hookspec
    def register_filters(self, registry: Registry, site: SiteData) -> None:
        """Register extra template filters on *registry*."""

    @hookspec
    def register_collections(
        self,
        items: Sequence[ContentItem],
        env: str | None,
    ) -> dict[str, Sequence[ContentItem]] | None:
        """Return name -> collection mappings added next to the built-ins."""

    @hookspec
    def markdown_render_rules(self) -> dict[str, Any] | None:
        """Return token type -> render rule overrides for the markdown renderer."""

    @hookspec
    def post_build(self, output_dir: Path, page_count: int) -> None:
        """Called after every page has been written."""

"""SiteData — the read-only bundle shared by every page render of a build."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from leafpress.config.settings import LeafSettings
    from leafpress.domain.collections import Collections
    from leafpress.domain.content import ContentItem
    from leafpress.domain.contributors import Contributor
    from leafpress.domain.slugs import SlugIndex


@dataclass(frozen=True)
class SiteData:
    """Everything derived from the content set before rendering starts.

    Constructed once per build, after loading and before the first page
    render; page renders only ever read from it, so it can be shared
    across worker threads.
    """

    settings: LeafSettings
    items: Sequence[ContentItem]
    collections: Collections
    index: SlugIndex
    contributors: Mapping[str, Contributor]

    def template_globals(self) -> dict[str, Any]:
        """Variables every template sees besides the page itself."""
        return {
            "collections": self.collections,
            "site": self.settings.site,
            "env": self.settings.env,
        }

"""QueryService — inspect collections and resolve slugs without rendering."""

from __future__ import annotations

from typing import Any

from leafpress.domain.content import ContentItem
from leafpress.domain.errors import LeafpressError
from leafpress.services.base import BaseService
from leafpress.services.result import ServiceError, ServiceResult
from leafpress.services.telemetry import traced


def item_summary(item: ContentItem) -> dict[str, Any]:
    """JSON-safe summary of a content item."""
    return {
        "slug": item.slug,
        "title": item.title,
        "url": item.url,
        "date": item.date.isoformat(),
        "draft": item.draft,
        "language": item.language,
        "tags": sorted(item.tags),
        "input_path": item.input_path,
    }


def _member(entry: Any) -> dict[str, Any]:
    if isinstance(entry, ContentItem):
        return item_summary(entry)
    return dict(entry)


class QueryService(BaseService):
    """Read-only views over a prepared site."""

    @traced
    def list_collections(self) -> ServiceResult:
        try:
            site = self._prepare_site()
        except LeafpressError as exc:
            return ServiceResult.failure("list_collections", exc)

        rows = [{"name": name, "count": len(members)} for name, members in site.collections.items()]
        return ServiceResult(
            ok=True,
            op="list_collections",
            data={"collections": rows, "env": self._settings.env},
        )

    @traced
    def show_collection(self, name: str) -> ServiceResult:
        try:
            site = self._prepare_site()
        except LeafpressError as exc:
            return ServiceResult.failure("show_collection", exc)

        if name not in site.collections:
            return ServiceResult(
                ok=False,
                op="show_collection",
                error=ServiceError(
                    code="UNKNOWN_COLLECTION",
                    message=f"No collection named {name!r}",
                    detail={"available": sorted(site.collections)},
                ),
            )
        members = site.collections[name]
        return ServiceResult(
            ok=True,
            op="show_collection",
            data={
                "name": name,
                "count": len(members),
                "items": [_member(entry) for entry in members],
            },
        )

    @traced
    def lookup(self, slug: str) -> ServiceResult:
        """Resolve *slug* through the slug index."""
        try:
            site = self._prepare_site()
            item = site.index.lookup(slug)
        except LeafpressError as exc:
            return ServiceResult.failure("lookup", exc)
        return ServiceResult(ok=True, op="lookup", data=item_summary(item))

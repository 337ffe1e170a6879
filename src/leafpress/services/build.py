"""BuildService — load, index, render and write a whole site.

Stages run strictly in order: site preparation (see
:class:`~leafpress.services.base.BaseService`), registry and renderer
setup, page rendering, output.  Nothing is written until every page has
rendered, so a fatal error leaves the output directory untouched.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from leafpress.domain.errors import LeafpressError, RenderError
from leafpress.infrastructure.filesystem import copy_passthrough, write_json, write_page
from leafpress.rendering.markdown import MarkdownRenderer
from leafpress.rendering.pages import PageRenderer
from leafpress.rendering.registry import create_registry
from leafpress.services.base import BaseService
from leafpress.services.result import ServiceResult
from leafpress.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from collections.abc import Sequence

    from leafpress.domain.content import ContentItem
    from leafpress.rendering.site import SiteData

SEARCH_EXPORT_FILE = "algolia.json"

log = structlog.get_logger("leafpress.build")


class BuildService(BaseService):
    """Full site builds."""

    @traced
    def build(self, *, output_dir: Path | None = None) -> ServiceResult:
        """Render every content item and write the site to *output_dir*.

        Defaults to the configured ``[dirs] output``.
        """
        output_dir = output_dir or self._settings.output_dir
        warnings: list[str] = []
        try:
            site = self._prepare_site()
            with trace_span("setup"):
                renderer = self.create_page_renderer(site)
            with trace_span("render") as span:
                pages = self._render_all(renderer, site.items, warnings)
                if span:
                    span.annotate("pages", len(pages))
            with trace_span("write"):
                written = self._write(output_dir, pages, site)
        except LeafpressError as exc:
            log.info("build.failed", code=exc.code, error=str(exc))
            return ServiceResult.failure("build", exc, warnings=warnings)

        if self._plugins is not None:
            self._plugins.notify_post_build(output_dir, len(pages))
        log.info("build.complete", pages=len(pages), output=str(output_dir))

        return ServiceResult(
            ok=True,
            op="build",
            data={
                "output_dir": str(output_dir),
                "page_count": len(pages),
                "skipped": len(site.items) - len(pages),
                "search_records": len(site.collections.algolia),
                **written,
            },
            warnings=warnings,
        )

    def create_page_renderer(self, site: SiteData) -> PageRenderer:
        """Markdown renderer, registry and page renderer for *site*."""
        rules = self._plugins.collect_render_rules() if self._plugins is not None else None
        markdown = MarkdownRenderer(self._settings.markdown, rules=rules)
        registry = create_registry(site, markdown=markdown, plugins=self._plugins)
        return PageRenderer(site, registry, markdown)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_all(
        self,
        renderer: PageRenderer,
        items: Sequence[ContentItem],
        warnings: list[str],
    ) -> list[tuple[ContentItem, str]]:
        """Render *items*, keeping ingestion order.

        With ``[build] workers > 1`` pages render on a thread pool; the
        first fatal error cancels every render that has not started.
        """
        workers = self._settings.build.workers
        if workers <= 1 or len(items) <= 1:
            results = [self._render_one(renderer, item, warnings) for item in items]
        else:
            pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="leafpress-render")
            with pool:
                futures = [
                    pool.submit(self._render_one, renderer, item, warnings) for item in items
                ]
                try:
                    for future in as_completed(futures):
                        future.result()
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise
                results = [future.result() for future in futures]
        return [(item, html) for item, html in results if html is not None]

    def _render_one(
        self,
        renderer: PageRenderer,
        item: ContentItem,
        warnings: list[str],
    ) -> tuple[ContentItem, str | None]:
        try:
            return item, renderer.render(item)
        except RenderError as exc:
            if not self._settings.build.tolerate_render_errors:
                raise
            log.warning(
                "build.page_skipped",
                page=exc.page,
                component=exc.component,
                error=exc.message,
            )
            warnings.append(f"Skipped {exc.page}: {exc}")
            return item, None

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _write(
        self,
        output_dir: Path,
        pages: list[tuple[ContentItem, str]],
        site: SiteData,
    ) -> dict[str, object]:
        output_dir.mkdir(parents=True, exist_ok=True)
        for item, html in pages:
            try:
                write_page(output_dir, item.path, html)
            except ValueError as exc:
                raise LeafpressError(f"{item.input_path or item.slug}: {exc}") from exc

        written: dict[str, object] = {"search_export": None, "copied_files": 0}
        if site.collections.algolia:
            written["search_export"] = str(
                write_json(output_dir / SEARCH_EXPORT_FILE, list(site.collections.algolia))
            )
        if self._settings.passthrough_file_copy:
            written["copied_files"] = copy_passthrough(
                self._settings.input_dir, output_dir, self._settings.template_formats
            )
        return written

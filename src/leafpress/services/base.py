"""BaseService — shared site preparation for leafpress services.

Every service receives the resolved :class:`LeafSettings` (and optionally a
loaded :class:`PluginManager`) at construction time.  ``_prepare_site``
runs the first half of a build, from loading content to deriving the
collections and the slug index, so that inspection commands see exactly
what a full build would.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from ruamel.yaml.error import YAMLError

from leafpress.domain.collections import build_collections
from leafpress.domain.contributors import ContributorDirectory
from leafpress.domain.errors import ConfigurationError, LeafpressError
from leafpress.domain.slugs import build_index
from leafpress.infrastructure.filesystem import load_content, read_data_file
from leafpress.rendering.site import SiteData
from leafpress.services.telemetry import trace_span

if TYPE_CHECKING:
    from leafpress.config.settings import LeafSettings
    from leafpress.plugins.manager import PluginManager

log = structlog.get_logger("leafpress.build")


class BaseService:
    """Base for service-layer classes.

    Usage::

        class BuildService(BaseService):
            def build(self) -> ServiceResult:
                site = self._prepare_site()
                ...
    """

    def __init__(
        self,
        settings: LeafSettings,
        *,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._plugins = plugins

    @property
    def settings(self) -> LeafSettings:
        return self._settings

    def _prepare_site(self) -> SiteData:
        """Load content and derive collections, index and contributors.

        Raises:
            ConfigurationError: Missing content root, bad collection options,
                or a plugin collection clashing with a built-in one.
            DuplicateSlugError: Two items share a slug under the ``error`` policy.
            LeafpressError: Unreadable content or data files.
        """
        settings = self._settings
        input_dir = settings.input_dir
        if not input_dir.is_dir():
            msg = f"Content directory not found: {input_dir}"
            raise ConfigurationError(msg)

        with trace_span("load") as span:
            try:
                items = load_content(
                    input_dir,
                    formats=settings.template_formats,
                    languages=settings.site.languages,
                    default_language=settings.site.default_language,
                )
            except ValueError as exc:
                raise LeafpressError(str(exc)) from exc
            try:
                contributors = ContributorDirectory.from_data(
                    read_data_file(settings.data_dir, "contributors")
                )
            except (ValueError, YAMLError) as exc:
                msg = f"Could not read contributors from {settings.data_dir}: {exc}"
                raise LeafpressError(msg) from exc
            if span:
                span.annotate("items", len(items))
        log.info("build.loaded", items=len(items), contributors=len(contributors))

        with trace_span("collections"):
            cfg = settings.collections
            collections = build_collections(
                items,
                env=settings.env,
                recent_window=cfg.recent_window,
                feed_size=cfg.feed_size,
                export_env=cfg.export_env,
                export_content_chars=cfg.export_content_chars,
            )
            if self._plugins is not None:
                extra = self._plugins.collect_collections(items, settings.env)
                try:
                    collections = collections.with_extra(extra)
                except ValueError as exc:
                    raise ConfigurationError(str(exc)) from exc

        with trace_span("index"):
            index = build_index(collections.memoized, duplicates=cfg.duplicate_slugs)
        log.info("build.indexed", slugs=len(index), collections=len(collections))

        return SiteData(
            settings=settings,
            items=tuple(items),
            collections=collections,
            index=index,
            contributors=contributors,
        )

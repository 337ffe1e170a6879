"""Page rendering — template pass, markdown pass, layout pass.

For each content item:

1. The body is evaluated as a Jinja2 template (when the configured engine
   for its format is enabled), with components and filters installed.
2. Markdown bodies are converted to HTML by the site renderer. Component
   output is kept out of this pass and spliced back in afterwards.
3. The result is wrapped in the item's layout (``layouts/default.html``
   when none is set; ``layout: ""`` renders the bare body).

Renders share nothing mutable: the environment is configured before the
first render and only read afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jinja2 import Environment, TemplateError
from markupsafe import Markup

from leafpress.domain.errors import RenderError, SlugNotFoundError, UnknownComponentError
from leafpress.infrastructure.templates import build_template_environment
from leafpress.rendering.registry import STASH_VAR, ComponentStash, Registry

if TYPE_CHECKING:
    from leafpress.domain.content import ContentItem
    from leafpress.rendering.markdown import MarkdownRenderer
    from leafpress.rendering.site import SiteData

DEFAULT_LAYOUT = "layouts/default.html"

logger = logging.getLogger(__name__)


class PageRenderer:
    """Render content items to complete HTML documents."""

    def __init__(
        self,
        site: SiteData,
        registry: Registry,
        markdown: MarkdownRenderer,
        *,
        env: Environment | None = None,
    ) -> None:
        self._settings = site.settings
        self._markdown = markdown
        self._env = env or build_template_environment(includes_dir=site.settings.includes_dir)
        registry.install(self._env)
        self._env.globals.update(site.template_globals())

    @property
    def environment(self) -> Environment:
        return self._env

    def render(self, item: ContentItem) -> str:
        """Render *item* to HTML.

        Raises:
            UnknownComponentError: A template calls an unregistered name.
            RenderError: A component rejected its arguments, a slug lookup
                missed, or a template failed to load, compile or evaluate.
        """
        try:
            return self._render(item)
        except UnknownComponentError as exc:
            if exc.page is None:
                raise UnknownComponentError(exc.name, item.input_path or item.url) from exc
            raise
        except SlugNotFoundError as exc:
            raise RenderError("findBySlug", item.input_path or item.url, str(exc)) from exc
        except TemplateError as exc:
            raise RenderError("template", item.input_path or item.url, str(exc)) from exc

    def render_body(self, item: ContentItem) -> str:
        """Render the body only (template + markdown passes, no layout)."""
        is_markdown = item.template_format == "md"
        engine = (
            self._settings.markdown_template_engine
            if is_markdown
            else self._settings.html_template_engine
        )
        body = item.body
        if engine is None:
            return self._markdown.render(body) if is_markdown else body
        if not is_markdown:
            return self._env.from_string(body).render(page=item)
        stash = ComponentStash()
        body = self._env.from_string(body).render(page=item, **{STASH_VAR: stash})
        return stash.restore(self._markdown.render(body))

    def _render(self, item: ContentItem) -> str:
        body = self.render_body(item)
        layout = DEFAULT_LAYOUT if item.layout is None else item.layout
        if not layout:
            return body
        template = self._env.select_template(
            [layout, f"{layout}.njk", f"{layout}.html", f"layouts/{layout}.html"]
        )
        logger.debug("Rendering %s with layout %s", item.input_path, template.name)
        return template.render(page=item, content=Markup(body))

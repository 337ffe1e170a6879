"""Markdown renderer — markdown-it-py with site-specific render rules.

Override rules are keyed by markdown-it token type and replace the
renderer's default for that construct:

- ``fence``: the default fence HTML wrapped in ``<web-copy-code>`` so the
  client can attach a "copy code" button.
- ``table_open`` / ``table_close``: the default table HTML wrapped in a
  scrollable ``<div class="w-table-wrapper">``.

Heading anchors and attribute annotations come from ``mdit_py_plugins``:

- ``anchors_plugin`` gives headings at ``anchor_level`` and deeper a
  slugified, per-document unique ``id`` and an optional permalink;
- ``attrs_block_plugin`` / ``attrs_plugin`` read ``{#id .class data-x=y}``
  on the line before a block, or directly after an image, inline code or
  link.  Only allow-listed attribute names and patterns are kept.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.renderer import RendererHTML
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from markdown_it.utils import EnvType, OptionsDict
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.attrs import attrs_block_plugin, attrs_plugin
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from leafpress.config.models import MarkdownConfig
from leafpress.domain.slugs import slugify

RenderRule = Callable[[RendererHTML, Sequence[Token], int, OptionsDict, EnvType], str]

logger = logging.getLogger(__name__)

# Class anchors_plugin puts on its permalink; restyled from config.
_PLUGIN_PERMALINK_CLASS = "header-anchor"


def highlight_code(code: str, lang: str, _attrs: str) -> str:
    """Pygments highlighting for fenced code; ``""`` keeps the default escaping."""
    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return ""
    return pygments_highlight(code, lexer, HtmlFormatter(nowrap=True))


def heading_slug(text: str) -> str:
    """Anchor id for a heading; ``section`` when nothing slug-worthy is left."""
    return slugify(text) or "section"


class MarkdownRenderer:
    """Site markdown renderer.

    Usage::

        renderer = MarkdownRenderer(settings.markdown)
        html = renderer.render(item.body)

    *rules* (e.g. from plugins) are applied after the built-in overrides
    and may replace them.
    """

    def __init__(
        self,
        config: MarkdownConfig | None = None,
        *,
        rules: Mapping[str, RenderRule] | None = None,
    ) -> None:
        self._config = config or MarkdownConfig()
        self._patterns = tuple(re.compile(p) for p in self._config.allowed_attribute_patterns)

        options: dict[str, Any] = {"html": True}
        if self._config.highlight:
            options["highlight"] = highlight_code
        allowed = list(self._config.allowed_attributes)
        md = (
            MarkdownIt("commonmark", options)
            .enable(["table", "strikethrough"])
            .use(attrs_block_plugin, allowed=allowed)
            .use(attrs_plugin, allowed=allowed)
            .use(
                anchors_plugin,
                min_level=self._config.anchor_level,
                max_level=6,
                slug_func=heading_slug,
                permalink=self._config.permalink,
                permalinkSymbol=self._config.permalink_symbol,
            )
        )
        # Block attributes are resolved onto the next block right after parsing;
        # inline ones only exist once the inline pass has run.
        restore = self._allow_attribute_patterns
        md.core.ruler.before("attr", "leaf_block_attribute_patterns", restore)
        md.core.ruler.push("leaf_inline_attribute_patterns", restore)
        if self._config.permalink:
            md.core.ruler.push("leaf_permalinks", self._style_permalinks)

        for name, rule in {**self._builtin_rules(md), **(rules or {})}.items():
            md.add_render_rule(name, rule)
        self._md = md

    @property
    def rule_names(self) -> list[str]:
        """Names of the render rules currently installed."""
        return sorted(self._md.renderer.rules)

    def render(self, text: str) -> str:
        """Render a markdown document to HTML."""
        return self._md.render(text)

    def render_inline(self, text: str) -> str:
        """Render a single line of markdown without a wrapping paragraph."""
        return self._md.renderInline(text)

    # ------------------------------------------------------------------
    # Render rules
    # ------------------------------------------------------------------

    def _builtin_rules(self, md: MarkdownIt) -> dict[str, RenderRule]:
        default_fence = md.renderer.rules["fence"]
        tag = self._config.code_wrapper_tag
        wrapper_class = self._config.table_wrapper_class

        def fence(
            renderer: RendererHTML,
            tokens: Sequence[Token],
            idx: int,
            options: OptionsDict,
            env: EnvType,
        ) -> str:
            return f"<{tag}>{default_fence(tokens, idx, options, env)}</{tag}>"

        def table_open(
            renderer: RendererHTML,
            tokens: Sequence[Token],
            idx: int,
            options: OptionsDict,
            env: EnvType,
        ) -> str:
            table = renderer.renderToken(tokens, idx, options, env)
            return f'<div class="{wrapper_class}">\n{table}'

        def table_close(
            renderer: RendererHTML,
            tokens: Sequence[Token],
            idx: int,
            options: OptionsDict,
            env: EnvType,
        ) -> str:
            return f"{renderer.renderToken(tokens, idx, options, env)}</div>\n"

        return {"fence": fence, "table_open": table_open, "table_close": table_close}

    # ------------------------------------------------------------------
    # Core rules
    # ------------------------------------------------------------------

    def _allow_attribute_patterns(self, state: StateCore) -> None:
        """Put back rejected attributes whose name matches an allowed pattern.

        The attrs plugins only know exact names; anything else lands in
        ``token.meta["insecure_attrs"]``.
        """
        if not self._patterns:
            return
        for token in state.tokens:
            for target in (token, *(token.children or ())):
                rejected = target.meta.get("insecure_attrs")
                if not rejected:
                    continue
                for name, value in rejected.items():
                    if any(p.search(name) for p in self._patterns):
                        target.attrSet(name, value)
                    else:
                        logger.debug("Dropping disallowed attribute %r", name)

    def _style_permalinks(self, state: StateCore) -> None:
        for token in state.tokens:
            if token.type != "inline" or not token.children:
                continue
            for child in token.children:
                if child.type == "link_open" and child.attrGet("class") == _PLUGIN_PERMALINK_CLASS:
                    child.attrSet("class", self._config.permalink_class)
                    child.attrSet("aria-hidden", "true")

"""Callout components: asides, banners, quotes, comparisons, details, blocks.

Paired components receive their already-rendered nested content first.
Nested content is markdown prose, so it goes through the site renderer
(``md``) before being wrapped.
"""

from __future__ import annotations

from collections.abc import Callable

from markupsafe import Markup

from leafpress.components._validation import choice, require

Markdown = Callable[[str], str]

ASIDE_TYPES = frozenset(
    {"note", "caution", "warning", "success", "objective", "gotchas", "key-term", "codelab"}
)
BANNER_TYPES = frozenset({"info", "caution", "warning"})
COMPARE_TYPES = frozenset({"better", "worse"})
HEADING_LEVELS = frozenset({"h2", "h3", "h4", "h5", "h6"})
TOOLTIP_POSITIONS = frozenset({"top", "bottom", "left", "right"})

_COMPARE_LABELS = {"better": "Do", "worse": "Don't"}

_DEVTOOLS = "Press `Control+Shift+J` (or `Command+Option+J` on Mac) to open DevTools."
INSTRUCTIONS: dict[str, tuple[str, ...]] = {
    "remix": ("Click **Remix to Edit** to make the project editable.",),
    "preview": ("To preview the site, press **View App**. Then press **Fullscreen**.",),
    "reload-page": ("Reload the page.",),
    "devtools": (_DEVTOOLS,),
    "devtools-console": (_DEVTOOLS, "Click the **Console** tab."),
    "devtools-network": (_DEVTOOLS, "Click the **Network** tab."),
    "devtools-elements": (_DEVTOOLS, "Click the **Elements** tab."),
    "audit": (
        _DEVTOOLS,
        "Click the **Lighthouse** tab.",
        "Click **Generate report**.",
    ),
    "audit-performance": (
        _DEVTOOLS,
        "Click the **Lighthouse** tab.",
        "Select the **Performance** checkbox.",
        "Click **Generate report**.",
    ),
}


def aside(content: str, type: str = "note", *, md: Markdown) -> Markup:
    choice("type", type, ASIDE_TYPES)
    return Markup('<div class="w-aside w-aside--{}">{}</div>').format(type, Markup(md(content)))


def banner(content: str, type: str = "info", *, md: Markdown) -> Markup:
    choice("type", type, BANNER_TYPES)
    return Markup('<div class="w-banner w-banner--{}">{}</div>').format(
        type, Markup(md(content))
    )


def blockquote(content: str, source: str | None = None, *, md: Markdown) -> Markup:
    cite = Markup("")
    if source:
        cite = Markup('<cite class="w-blockquote__cite">{}</cite>').format(source)
    return Markup(
        '<blockquote class="w-blockquote"><div class="w-blockquote__text">{}</div>{}</blockquote>'
    ).format(Markup(md(content)), cite)


def compare(content: str, type: str = "worse", label: str | None = None, *, md: Markdown) -> Markup:
    choice("type", type, COMPARE_TYPES)
    return Markup(
        '<figure class="w-compare">'
        '<p class="w-compare__label w-compare__label--{}">{}</p>{}</figure>'
    ).format(type, label or _COMPARE_LABELS[type], Markup(md(content)))


def compare_caption(content: str, *, md: Markdown) -> Markup:
    return Markup('<figcaption class="w-compare__caption">{}</figcaption>').format(
        Markup(md(content))
    )


def details(content: str, state: str | None = None, *, md: Markdown) -> Markup:
    if state is not None:
        choice("state", state, {"open"})
    opened = Markup(" open") if state == "open" else Markup("")
    return Markup('<details class="w-details"{}>{}</details>').format(opened, Markup(md(content)))


def details_summary(content: str, heading_level: str = "h2", *, md_inline: Markdown) -> Markup:
    choice("heading_level", heading_level, HEADING_LEVELS)
    # heading_level is validated against a fixed set, so it is safe as a tag name.
    return Markup(
        '<summary class="w-details__summary">'
        '<{level} class="w-details__header">{}</{level}></summary>'.replace(
            "{level}", heading_level
        )
    ).format(Markup(md_inline(content.strip())))


def block(content: str, *, md: Markdown) -> Markup:
    return Markup('<div class="w-block">{}</div>').format(Markup(md(content)))


def instruction(type: str, list_style: str = "ol", *, md_inline: Markdown) -> Markup:
    choice("type", type, INSTRUCTIONS)
    choice("list_style", list_style, {"ol", "ul"})
    items = Markup("").join(
        Markup('<li class="w-instruction__step">{}</li>').format(Markup(md_inline(step)))
        for step in INSTRUCTIONS[type]
    )
    return Markup('<{tag} class="w-instruction">{}</{tag}>'.replace("{tag}", list_style)).format(
        items
    )


def tooltip(title: str | None = None, position: str = "top") -> Markup:
    require("title", title)
    choice("position", position, TOOLTIP_POSITIONS)
    return Markup('<span class="w-tooltip w-tooltip--{}" role="tooltip">{}</span>').format(
        position, title
    )

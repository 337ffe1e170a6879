"""Built-in components (shortcodes) for site templates.

Each component is a plain function of its template arguments returning an
HTML fragment.  Site data a component needs is bound here with
``functools.partial``, once per build.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from leafpress.components import callouts, media, navigation

if TYPE_CHECKING:
    from leafpress.rendering.markdown import MarkdownRenderer
    from leafpress.rendering.registry import Registry
    from leafpress.rendering.site import SiteData


def register_builtin_components(
    registry: Registry,
    site: SiteData,
    *,
    markdown: MarkdownRenderer,
) -> None:
    """Register every built-in component on *registry*."""
    md = markdown.render
    md_inline = markdown.render_inline
    people = site.contributors
    languages = site.settings.site.languages

    # --- Paired ---
    registry.register_component("Aside", partial(callouts.aside, md=md), "paired")
    registry.register_component("Banner", partial(callouts.banner, md=md), "paired")
    registry.register_component("Block", partial(callouts.block, md=md), "paired")
    registry.register_component("Blockquote", partial(callouts.blockquote, md=md), "paired")
    registry.register_component("Compare", partial(callouts.compare, md=md), "paired")
    registry.register_component(
        "CompareCaption", partial(callouts.compare_caption, md=md), "paired"
    )
    registry.register_component("Details", partial(callouts.details, md=md), "paired")
    registry.register_component(
        "DetailsSummary", partial(callouts.details_summary, md_inline=md_inline), "paired"
    )
    registry.register_component("Figure", partial(media.figure, md=md), "paired")

    # --- Single ---
    registry.register_component("ArticleNavigation", navigation.article_navigation)
    registry.register_component("Author", partial(navigation.author, contributors=people))
    registry.register_component("AuthorInfo", partial(navigation.author_info, contributors=people))
    registry.register_component(
        "Breadcrumbs",
        partial(navigation.breadcrumbs, languages=languages),
        needs_page=True,
    )
    registry.register_component(
        "CodelabsCallout", partial(navigation.codelabs_callout, index=site.index)
    )
    registry.register_component("Hero", media.hero)
    registry.register_component("Image", media.image)
    registry.register_component(
        "Instruction", partial(callouts.instruction, md_inline=md_inline)
    )
    registry.register_component(
        "Meta",
        partial(navigation.meta, site=site.settings.site),
        needs_page=True,
    )
    registry.register_component("PathCard", partial(navigation.path_card, index=site.index))
    registry.register_component(
        "PostCard",
        partial(navigation.post_card, index=site.index, contributors=people),
    )
    registry.register_component("Tooltip", callouts.tooltip)
    registry.register_component("YouTube", media.youtube)

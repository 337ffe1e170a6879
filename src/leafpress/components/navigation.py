"""Navigation and cross-reference components.

These read site data (slug index, contributor directory, site settings),
which the registry binds as keyword arguments when the build starts.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from markupsafe import Markup

from leafpress.components._validation import require
from leafpress.config.models import SiteConfig
from leafpress.domain.content import ContentItem
from leafpress.domain.contributors import Contributor
from leafpress.domain.slugs import SlugIndex
from leafpress.rendering.filters import absolute_url, strip_language


def _contributor(
    contributors: Mapping[str, Contributor], contributor_id: str | None
) -> Contributor:
    require("id", contributor_id)
    try:
        return contributors[str(contributor_id)]
    except KeyError:
        msg = f"unknown contributor {contributor_id!r}"
        raise ValueError(msg) from None


def _resolve_post(post: ContentItem | str | None, index: SlugIndex) -> ContentItem:
    require("post", post)
    if isinstance(post, ContentItem):
        return post
    return index.lookup(str(post))


def author(
    id: str | None = None,
    *,
    contributors: Mapping[str, Contributor],
) -> Markup:
    person = _contributor(contributors, id)
    image = Markup("")
    if person.image:
        image = Markup(
            '<img class="w-author__image" src="{}" alt="{}" width="40" height="40">'
        ).format(person.image, person.name)
    return Markup(
        '<div class="w-author">{}<div class="w-author__info">'
        '<cite class="w-author__name"><a class="w-author__link" href="{}">{}</a></cite>'
        "</div></div>"
    ).format(image, person.href, person.name)


def author_info(
    id: str | None = None,
    *,
    contributors: Mapping[str, Contributor],
) -> Markup:
    person = _contributor(contributors, id)
    links = Markup("")
    if person.twitter:
        links += Markup(
            '<li class="w-author__social"><a href="https://twitter.com/{}">Twitter</a></li>'
        ).format(person.twitter)
    if person.github:
        links += Markup(
            '<li class="w-author__social"><a href="https://github.com/{}">GitHub</a></li>'
        ).format(person.github)
    if person.homepage:
        links += Markup('<li class="w-author__social"><a href="{}">Homepage</a></li>').format(
            person.homepage
        )
    return Markup(
        '<div class="w-author-info"><h2 class="w-author-info__name">{}</h2>'
        '<p class="w-author-info__title">{}</p><ul class="w-author__socials">{}</ul></div>'
    ).format(person.name, person.title, links)


def breadcrumbs(*, page: Any, languages: Iterable[str]) -> Markup:
    """Links to every ancestor of the current page, language prefix removed."""
    url = getattr(page, "url", None) or (page.get("url") if isinstance(page, dict) else None)
    require("page.url", url)
    segments = [s for s in strip_language(str(url), languages=languages).split("/") if s]
    crumbs = [Markup('<li class="w-breadcrumbs__crumb"><a href="/">Home</a></li>')]
    href = "/"
    for segment in segments[:-1]:
        href += f"{segment}/"
        crumbs.append(
            Markup('<li class="w-breadcrumbs__crumb"><a href="{}">{}</a></li>').format(
                href, segment.replace("-", " ").capitalize()
            )
        )
    return Markup('<nav class="w-breadcrumbs"><ol>{}</ol></nav>').format(Markup("").join(crumbs))


def article_navigation(
    back: str | None = None,
    back_label: str = "Previous",
    forward: str | None = None,
    forward_label: str = "Next",
) -> Markup:
    if not back and not forward:
        msg = "at least one of 'back' or 'forward' is required"
        raise ValueError(msg)
    links = Markup("")
    if back:
        links += Markup(
            '<a class="w-article-navigation__link w-article-navigation__link--back"'
            ' href="{}">{}</a>'
        ).format(back, back_label)
    if forward:
        links += Markup(
            '<a class="w-article-navigation__link w-article-navigation__link--next"'
            ' href="{}">{}</a>'
        ).format(forward, forward_label)
    return Markup('<nav class="w-article-navigation">{}</nav>').format(links)


def post_card(
    post: ContentItem | str | None = None,
    *,
    index: SlugIndex,
    contributors: Mapping[str, Contributor],
) -> Markup:
    """Teaser card for a post, given the item itself or its slug."""
    item = _resolve_post(post, index)
    names = [contributors[c].name for c in item.contributors if c in contributors]
    authors = Markup("")
    if names:
        authors = Markup('<div class="w-post-card__authors">{}</div>').format(", ".join(names))
    return Markup(
        '<div class="w-card"><article class="w-post-card">'
        '<a class="w-post-card__link" href="{}"><h2 class="w-post-card__headline">{}</h2></a>'
        '<p class="w-post-card__desc">{}</p>{}</article></div>'
    ).format(item.url, item.title, item.description, authors)


def codelabs_callout(
    slugs: Sequence[str] | str | None = None,
    *,
    index: SlugIndex,
) -> Markup:
    """Callout linking to one or more codelabs by slug."""
    require("slugs", slugs)
    if isinstance(slugs, str):
        slugs = [slugs]
    links = Markup("").join(
        Markup(
            '<li class="w-callout__item"><a class="w-callout__link" href="{}">{}</a></li>'
        ).format(item.url, item.title)
        for item in (index.lookup(slug) for slug in slugs)
    )
    return Markup(
        '<div class="w-callout"><div class="w-callout__header">'
        '<h2 class="w-callout__lockup">Codelabs</h2></div>'
        '<div class="w-callout__blurb">See it in action</div>'
        '<ul class="w-callout__list">{}</ul></div>'
    ).format(links)


def path_card(name: str | None = None, *, index: SlugIndex) -> Markup:
    """Card for a learning path, looked up by the slug of its landing page.

    The landing page's ``cover`` frontmatter, when set, becomes the card image.
    """
    require("name", name)
    item = index.lookup(str(name))
    cover = Markup("")
    if item.data.get("cover"):
        cover = Markup('<img class="w-path-card__cover" src="{}" alt="">').format(
            item.data["cover"]
        )
    return Markup(
        '<a class="w-path-card" href="{}"><div class="w-path-card__info">'
        '<h2 class="w-path-card__title">{}</h2><p class="w-path-card__desc">{}</p>'
        "</div>{}</a>"
    ).format(item.url, item.title, item.description, cover)


def meta(*, page: Any, site: SiteConfig) -> Markup:
    """SEO and social meta tags for the current page."""
    require("page", page)
    title = getattr(page, "title", "") or ""
    description = getattr(page, "description", "") or ""
    url = absolute_url(getattr(page, "url", "/") or "/", site.url)
    return Markup(
        '<link rel="canonical" href="{url}">'
        '<meta property="og:title" content="{title}">'
        '<meta property="og:description" content="{description}">'
        '<meta property="og:url" content="{url}">'
        '<meta name="twitter:card" content="summary_large_image">'
    ).format(url=url, title=title, description=description)

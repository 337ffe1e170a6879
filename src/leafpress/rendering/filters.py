"""Template filters — pure functions invoked by name from templates.

Every filter is referentially transparent.  Filters that need site data
(contributor directory, slug index, language list, repository location)
take it as explicit keyword arguments; :func:`builtin_filters` binds those
once per build so templates call them with their natural arguments.

Policies:

- ``containsTag`` is case-sensitive.
- ``expandContributors`` drops unknown ids and logs a warning.
- Date filters format in UTC; naive datetimes are taken as UTC.
"""

from __future__ import annotations

import functools
import json
import logging
import math
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from datetime import date, datetime
from email.utils import format_datetime
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from leafpress.domain.collections import remove_drafts
from leafpress.domain.content import ContentItem, to_utc
from leafpress.domain.contributors import Contributor
from leafpress.domain.errors import ConfigurationError

if TYPE_CHECKING:
    from leafpress.config.settings import LeafSettings
    from leafpress.domain.slugs import SlugIndex
    from leafpress.rendering.markdown import MarkdownRenderer

logger = logging.getLogger(__name__)

Filter = Callable[..., Any]


# ---------------------------------------------------------------------------
# Collection filters
# ---------------------------------------------------------------------------


def contains_tag(item: ContentItem, tag: str) -> bool:
    """Whether *item* carries *tag* (exact, case-sensitive match)."""
    return tag in item.tags


class Pages(Sequence[tuple[Any, ...]]):
    """Lazy, restartable fixed-size pages over a sequence.

    Each iteration starts from the first page; the last page may be
    shorter.  ``len()`` is ``ceil(len(items) / page_size)``; a slice gives a
    tuple of pages.
    """

    def __init__(self, items: Sequence[Any], page_size: int) -> None:
        self._items = items
        self.page_size = page_size

    def __len__(self) -> int:
        return math.ceil(len(self._items) / self.page_size)

    def __getitem__(self, index: int | slice) -> Any:  # type: ignore[override]
        if isinstance(index, slice):
            return tuple(self[i] for i in range(*index.indices(len(self))))
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError(index)
        start = index * self.page_size
        return tuple(self._items[start : start + self.page_size])

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        for start in range(0, len(self._items), self.page_size):
            yield tuple(self._items[start : start + self.page_size])


def paginate(items: Iterable[Any], page_size: int) -> Pages:
    """Split *items* into pages of *page_size*.

    Raises:
        ConfigurationError: If *page_size* is not a positive integer.
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        msg = f"Page size must be a positive integer, got {page_size!r}"
        raise ConfigurationError(msg)
    seq = items if isinstance(items, Sequence) else tuple(items)
    return Pages(seq, page_size)


def expand_contributors(
    ids: Iterable[str] | None,
    *,
    directory: Mapping[str, Contributor],
) -> list[Contributor]:
    """Resolve contributor ids into records, dropping unknown ids."""
    expanded: list[Contributor] = []
    for contributor_id in ids or ():
        contributor = directory.get(contributor_id)
        if contributor is None:
            logger.warning("Dropping unknown contributor id %r", contributor_id)
            continue
        expanded.append(contributor)
    return expanded


def find_by_slug(slug: str | None, *, index: SlugIndex) -> ContentItem:
    """Look up an item through the slug index.

    Raises:
        SlugNotFoundError: If *slug* is not indexed.
    """
    return index.lookup(slug)


def posts_lighthouse_json(items: Iterable[ContentItem]) -> str:
    """Serialize measurement data of *items* for client-side charts."""
    payload = [
        {
            "url": item.url,
            "title": item.title,
            "date": item.date.isoformat(),
            "lighthouse": item.measurement_data,
        }
        for item in items
        if item.measurement_data
    ]
    return json.dumps(payload, sort_keys=True)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def pretty_date(value: datetime | date) -> str:
    """Human-readable UTC date, e.g. ``January 2, 2006``."""
    d = to_utc(value)
    return f"{d:%B} {d.day}, {d.year}"


def html_date_string(value: datetime | date) -> str:
    """Machine-readable UTC date (ISO 8601 ``YYYY-MM-DD``)."""
    return to_utc(value).strftime("%Y-%m-%d")


def rss_date(value: datetime | date) -> str:
    """RFC 822 date for RSS feeds."""
    return format_datetime(to_utc(value))


def rss_last_updated_date(items: Iterable[ContentItem]) -> str:
    """RFC 822 date of the most recently updated item, ``""`` if none."""
    newest = max((item.updated or item.date for item in items), default=None)
    return rss_date(newest) if newest is not None else ""


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def _segments(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


def _rebuild(original: str, segments: list[str]) -> str:
    if not segments:
        return "/"
    lead = "/" if original.startswith("/") else ""
    trail = "/" if original.endswith("/") else ""
    return lead + "/".join(segments) + trail


def path_slug(path: str) -> str:
    """Last non-empty segment of a site path (``/en/blog/foo/`` -> ``foo``)."""
    segments = _segments(path)
    return segments[-1] if segments else ""


def strip_blog(path: str) -> str:
    """Remove leading ``blog`` segments (``/blog/foo/`` -> ``/foo/``)."""
    segments = _segments(path)
    while segments and segments[0] == "blog":
        segments.pop(0)
    return _rebuild(path, segments)


def strip_language(path: str, *, languages: Iterable[str]) -> str:
    """Remove leading language segments (``/es/foo/`` -> ``/foo/``)."""
    known = frozenset(languages)
    segments = _segments(path)
    while segments and segments[0] in known:
        segments.pop(0)
    return _rebuild(path, segments)


def github_link(
    input_path: str,
    *,
    repo_url: str,
    branch: str,
    content_root: str,
) -> str:
    """Repository URL of a content file, relative to the content root."""
    parts = [content_root.strip("/"), input_path.removeprefix("./").lstrip("/")]
    relative = "/".join(part for part in parts if part)
    return f"{repo_url.rstrip('/')}/blob/{branch}/{relative}"


def absolute_url(path: str, base: str) -> str:
    """Join a site-relative *path* onto *base* (``https://web.dev``)."""
    if "://" in path:
        return path
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def builtin_filters(
    settings: LeafSettings,
    *,
    index: SlugIndex,
    contributors: Mapping[str, Contributor],
    markdown: MarkdownRenderer,
) -> dict[str, Filter]:
    """Template name -> filter, with site data bound for this build."""
    def md(text: str | None) -> Markup:
        return Markup(markdown.render_inline(text or ""))

    return {
        "removeDrafts": remove_drafts,
        "containsTag": contains_tag,
        "paginate": paginate,
        "expandContributors": functools.partial(expand_contributors, directory=contributors),
        "findBySlug": functools.partial(find_by_slug, index=index),
        "prettyDate": pretty_date,
        "htmlDateString": html_date_string,
        "pathSlug": path_slug,
        "stripBlog": strip_blog,
        "stripLanguage": functools.partial(strip_language, languages=settings.site.languages),
        "githubLink": functools.partial(
            github_link,
            repo_url=settings.site.repo_url,
            branch=settings.site.repo_branch,
            content_root=settings.site.repo_content_root,
        ),
        "md": md,
        "postsLighthouseJson": posts_lighthouse_json,
        "absoluteUrl": absolute_url,
        "rssDate": rss_date,
        "rssLastUpdatedDate": rss_last_updated_date,
    }

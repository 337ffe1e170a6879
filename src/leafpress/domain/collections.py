"""Collection derivation — named, ordered views over the content set.

Each builder is a pure function of the full item set.  Collections hold
references into the canonical item list and are built once per build:

- ``posts``: non-draft items, newest first.
- ``postsWithLighthouse``: ``posts`` that carry measurement data.
- ``recentPosts``: a bounded prefix of ``posts``.
- ``feed``: the prefix of ``posts`` published in RSS/Atom feeds.
- ``memoized``: every item, drafts included; the slug index is built
  against it, so it is a superset of every other collection.
- ``algolia``: search-export records, only when the build environment
  equals the export environment.

Ordering: primary key ``date`` descending, secondary key ingestion order.
Python's sort is stable (also with ``reverse=True``), so equal dates keep
the order the loader produced.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from leafpress.domain.content import ContentItem
from leafpress.domain.errors import ConfigurationError

Collection = tuple[ContentItem, ...]

_TAG_PATTERN = re.compile(r"<[^>]+>")
_FENCE_PATTERN = re.compile(r"^(```|~~~).*$", re.MULTILINE)
_MARKDOWN_PUNCT = re.compile(r"^\s{0,3}(#{1,6}|>|[-*+]|\d+\.)\s+", re.MULTILINE)
_WHITESPACE = re.compile(r"\s+")


def remove_drafts(items: Iterable[ContentItem]) -> Collection:
    """Return *items* without draft items, preserving order."""
    return tuple(item for item in items if not item.draft)


def post_descending(items: Iterable[ContentItem]) -> Collection:
    """Non-draft items sorted by date, newest first (stable)."""
    return tuple(sorted(remove_drafts(items), key=lambda item: item.date, reverse=True))


def posts_with_lighthouse(items: Iterable[ContentItem]) -> Collection:
    """Chronological posts that carry non-empty measurement data."""
    return tuple(item for item in post_descending(items) if item.measurement_data)


def recent_posts(items: Iterable[ContentItem], window: int) -> Collection:
    """The *window* newest posts.

    Raises:
        ConfigurationError: If *window* is negative.
    """
    if window < 0:
        msg = f"Recent posts window must be >= 0, got {window}"
        raise ConfigurationError(msg)
    return post_descending(items)[:window]


def memoized(items: Iterable[ContentItem]) -> Collection:
    """The full item set, unfiltered, in ingestion order."""
    return tuple(items)


def plain_text(body: str) -> str:
    """Strip HTML tags and block-level markdown markers from *body*."""
    text = _FENCE_PATTERN.sub("", body)
    text = _TAG_PATTERN.sub("", text)
    text = _MARKDOWN_PUNCT.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def search_record(item: ContentItem, *, content_chars: int) -> dict[str, Any]:
    """JSON-serializable search-index record for one item."""
    return {
        "objectID": item.slug,
        "title": item.title,
        "description": item.description,
        "url": item.url,
        "tags": sorted(item.tags),
        "date": item.date.isoformat(),
        "language": item.language,
        "content": plain_text(item.body)[:content_chars],
    }


def algolia_posts(
    items: Iterable[ContentItem],
    env: str | None,
    *,
    export_env: str = "prod",
    content_chars: int = 5000,
) -> tuple[dict[str, Any], ...]:
    """Search-export records, or ``()`` unless ``env == export_env``.

    *env* is the build environment flag, passed explicitly by the caller.
    """
    if not env or env != export_env:
        return ()
    return tuple(
        search_record(item, content_chars=content_chars) for item in post_descending(items)
    )


class Collections(Mapping[str, Sequence[Any]]):
    """Named collections of one build, read-only after construction."""

    def __init__(self, named: dict[str, Sequence[Any]]) -> None:
        self._named = named

    def __getitem__(self, name: str) -> Sequence[Any]:
        return self._named[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._named)

    def __len__(self) -> int:
        return len(self._named)

    def __getattr__(self, name: str) -> Sequence[Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._named[name]
        except KeyError:
            raise AttributeError(name) from None

    def with_extra(self, extra: Mapping[str, Sequence[Any]]) -> Collections:
        """Return a new instance including *extra* collections.

        Raises:
            ValueError: If a name is already taken.
        """
        clashes = sorted(set(extra) & set(self._named))
        if clashes:
            msg = f"Collection names already registered: {', '.join(clashes)}"
            raise ValueError(msg)
        return Collections({**self._named, **{k: tuple(v) for k, v in extra.items()}})


def build_collections(
    items: Sequence[ContentItem],
    *,
    env: str | None = None,
    recent_window: int = 3,
    feed_size: int = 10,
    export_env: str = "prod",
    export_content_chars: int = 5000,
) -> Collections:
    """Build every named collection once from the full item set."""
    if feed_size < 0:
        msg = f"Feed size must be >= 0, got {feed_size}"
        raise ConfigurationError(msg)
    posts = post_descending(items)
    return Collections(
        {
            "all": memoized(items),
            "posts": posts,
            "postsWithLighthouse": posts_with_lighthouse(posts),
            "recentPosts": recent_posts(items, recent_window),
            "feed": posts[:feed_size],
            "memoized": memoized(items),
            "algolia": algolia_posts(
                items,
                env,
                export_env=export_env,
                content_chars=export_content_chars,
            ),
        }
    )

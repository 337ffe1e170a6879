"""Slug index and slugification.

The index turns the memoized collection into a lookup table so templates
can cross-reference items ("find related post") without looping over the
whole content set.  It is built in a single pass and never re-scans.

Duplicate slug policy:

- ``"error"`` (default): a second item with an already-indexed slug raises
  :class:`DuplicateSlugError`.
- ``"last_wins"``: the later item in iteration order replaces the earlier
  one; a warning is logged for every replacement.

Both policies are deterministic for a given ingestion order.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable, Iterator, Mapping
from typing import Literal

from leafpress.domain.content import ContentItem
from leafpress.domain.errors import DuplicateSlugError, SlugNotFoundError

DuplicatePolicy = Literal["error", "last_wins"]

logger = logging.getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(text: str, *, replacement: str = "-") -> str:
    """Derive a lowercase, URL-safe slug from free text.

    Applies NFKD normalization and drops non-ASCII marks, then collapses
    every run of non-alphanumeric characters into *replacement*.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
        >>> slugify("Crème brûlée")
        'creme-brulee'
    """
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_SLUG_CHARS.sub(replacement, folded.lower()).strip(replacement)


class SlugIndex(Mapping[str, ContentItem]):
    """Read-only slug -> ContentItem mapping with O(1) lookups."""

    def __init__(self, by_slug: dict[str, ContentItem]) -> None:
        self._by_slug = by_slug

    def lookup(self, slug: str | None) -> ContentItem:
        """Return the item indexed under *slug*.

        Raises:
            SlugNotFoundError: If *slug* is empty or not indexed.
        """
        if not slug:
            raise SlugNotFoundError(slug)
        try:
            return self._by_slug[slug]
        except KeyError:
            raise SlugNotFoundError(slug) from None

    def __getitem__(self, slug: str) -> ContentItem:
        return self._by_slug[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_slug)

    def __len__(self) -> int:
        return len(self._by_slug)


def build_index(
    items: Iterable[ContentItem],
    *,
    duplicates: DuplicatePolicy = "error",
) -> SlugIndex:
    """Index *items* by slug in a single pass.

    Raises:
        DuplicateSlugError: Under the ``"error"`` policy, on the first
            repeated slug.
        ValueError: For an unknown *duplicates* policy.
    """
    if duplicates not in ("error", "last_wins"):
        msg = f"Unknown duplicate slug policy: {duplicates!r}"
        raise ValueError(msg)

    by_slug: dict[str, ContentItem] = {}
    for item in items:
        existing = by_slug.get(item.slug)
        if existing is not None:
            if duplicates == "error":
                raise DuplicateSlugError(
                    item.slug,
                    existing.input_path or existing.path,
                    item.input_path or item.path,
                )
            logger.warning(
                "Duplicate slug %r: %s replaces %s",
                item.slug,
                item.input_path,
                existing.input_path,
            )
        by_slug[item.slug] = item
    return SlugIndex(by_slug)

"""Content items — frontmatter parsing and the immutable item record.

ContentItem fields are derived from YAML frontmatter plus the item's
location under the content root.  Items are created once by the loader
and are read-only for the rest of the build: collections and the slug
index hold references to them, never copies.

Pure parsing utilities (``parse_frontmatter``) live here so that the
dependency direction stays clean: infrastructure -> domain, never the
reverse.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime, time
from pathlib import PurePosixPath
from typing import Any

from pydantic import BaseModel, Field, field_validator
from ruamel.yaml import YAML

_FRONTMATTER_DELIMITER = "---"

# Frontmatter keys that map onto ContentItem fields.  Everything else is
# kept verbatim in ``ContentItem.data``.
_CONSUMED_KEYS = frozenset(
    {
        "slug",
        "date",
        "updated",
        "tags",
        "draft",
        "lang",
        "language",
        "authors",
        "contributors",
        "lighthouse",
        "title",
        "description",
        "layout",
        "permalink",
    }
)


def _new_yaml() -> YAML:
    """Create a fresh safe YAML parser.

    A new instance per call keeps parser state from leaking between files.
    """
    return YAML(typ="safe", pure=True)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter and body from markdown content.

    Expects the file to start with ``---`` on the first line. The second
    ``---`` closes the YAML block. Everything after is the body.

    Returns:
        A ``(frontmatter_dict, body_text)`` tuple. If no valid
        frontmatter delimiters are found, returns ``({}, content)``.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    if body.startswith("\n"):
        body = body[1:]

    fm = _new_yaml().load(yaml_block) or {}
    if not isinstance(fm, dict):
        msg = "Frontmatter must be a mapping"
        raise ValueError(msg)
    return dict(fm), body


def to_utc(value: datetime | date) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime.

    Naive datetimes are taken to already be UTC.
    """
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


class ContentItem(BaseModel):
    """One document of the site with metadata and a raw body.

    Attributes:
        slug: Unique, URL-safe identifier used for cross-references.
        date: Publication timestamp (aware, UTC).
        path: Logical site path, e.g. ``/en/blog/foo/``.
        measurement_data: Optional Lighthouse-style score payload.
        input_path: Source file relative to the content root (POSIX).
        template_format: Source extension (``md``, ``njk``, ...).
    """

    model_config = {"frozen": True}

    slug: str
    date: datetime
    path: str
    body: str = ""
    title: str = ""
    description: str = ""
    tags: frozenset[str] = frozenset()
    draft: bool = False
    language: str = "en"
    contributors: tuple[str, ...] = ()
    measurement_data: dict[str, Any] | None = None
    updated: datetime | None = None
    input_path: str = ""
    template_format: str = "md"
    layout: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("date", "updated", mode="before")
    @classmethod
    def _normalize_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        if isinstance(value, (date, datetime)):
            return to_utc(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> Any:
        return frozenset(_as_tuple(value))

    @field_validator("contributors", mode="before")
    @classmethod
    def _normalize_contributors(cls, value: Any) -> Any:
        return _as_tuple(value)

    @property
    def url(self) -> str:
        """Site-relative URL of the rendered page."""
        return self.path

    @classmethod
    def from_source(
        cls,
        frontmatter: Mapping[str, Any],
        body: str,
        *,
        input_path: str,
        modified: datetime,
        languages: Iterable[str] = (),
        default_language: str = "en",
    ) -> ContentItem:
        """Build an item from parsed frontmatter and its source location.

        Derivation rules:

        - ``slug``: frontmatter ``slug``, else the file stem; ``index``
          files take their directory name.
        - ``path``: frontmatter ``permalink``, else the directory layout
          (``en/blog/foo/index.md`` -> ``/en/blog/foo/``).
        - ``language``: frontmatter ``lang``, else the first path segment
          when it is a known language, else *default_language*.
        - ``date``: frontmatter ``date``, else *modified*.
        """
        source = PurePosixPath(input_path)
        dir_parts = list(source.parent.parts) if str(source.parent) != "." else []
        page_parts = dir_parts if source.stem == "index" else [*dir_parts, source.stem]

        slug = frontmatter.get("slug")
        if not slug:
            slug = page_parts[-1] if page_parts else "index"

        path = frontmatter.get("permalink")
        if not path:
            path = "/" + "".join(f"{part}/" for part in page_parts)

        language = frontmatter.get("lang") or frontmatter.get("language")
        if not language:
            known = set(languages)
            language = dir_parts[0] if dir_parts and dir_parts[0] in known else default_language

        data = {k: v for k, v in frontmatter.items() if k not in _CONSUMED_KEYS}

        return cls(
            slug=str(slug),
            date=frontmatter.get("date") or modified,
            updated=frontmatter.get("updated"),
            path=str(path),
            body=body,
            title=str(frontmatter.get("title") or ""),
            description=str(frontmatter.get("description") or ""),
            tags=frontmatter.get("tags"),
            draft=bool(frontmatter.get("draft", False)),
            language=str(language),
            contributors=frontmatter.get("authors") or frontmatter.get("contributors"),
            measurement_data=frontmatter.get("lighthouse") or None,
            input_path=input_path,
            template_format=source.suffix.lstrip("."),
            layout=frontmatter.get("layout"),
            data=data,
        )

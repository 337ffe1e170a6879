"""Filesystem operations: content discovery, loading, and page output.

INVARIANT: Files are truth. A build reads the content root once, before
any collection or index is derived, and writes output only after every
page has rendered.

Pure parsing utilities live in :mod:`leafpress.domain.content`
(correct dependency direction: infrastructure -> domain). This module
handles actual file I/O, path resolution, and file discovery.
"""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath
from typing import Any

from ruamel.yaml import YAML

from leafpress.domain.content import ContentItem, parse_frontmatter

# Directories to skip when discovering content files.
_SKIP_DIRS = frozenset({".git", "node_modules", "_includes", "_data"})

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Discovery and loading
# ---------------------------------------------------------------------------


def find_content_files(input_dir: Path, formats: Iterable[str]) -> list[Path]:
    """Discover every template file under *input_dir*, sorted by path.

    Sorting makes ingestion order (and therefore the secondary sort key of
    every collection) independent of filesystem iteration order.
    """
    suffixes = {f".{fmt}" for fmt in formats}
    results: list[Path] = []
    if not input_dir.is_dir():
        return results
    for path in input_dir.rglob("*"):
        if not path.is_file() or path.suffix not in suffixes:
            continue
        if any(part in _SKIP_DIRS for part in path.relative_to(input_dir).parts):
            continue
        results.append(path)
    return sorted(results)


def load_content(
    input_dir: Path,
    *,
    formats: Iterable[str] = ("njk", "md"),
    languages: Iterable[str] = (),
    default_language: str = "en",
) -> list[ContentItem]:
    """Read every content file under *input_dir* into a ContentItem.

    Raises:
        ValueError: If a file carries malformed frontmatter.
    """
    languages = tuple(languages)
    items: list[ContentItem] = []
    for path in find_content_files(input_dir, formats):
        rel = PurePosixPath(path.relative_to(input_dir).as_posix())
        try:
            frontmatter, body = parse_frontmatter(path.read_text(encoding="utf-8"))
        except Exception as exc:
            msg = f"Could not parse {rel}: {exc}"
            raise ValueError(msg) from exc
        modified = datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
        items.append(
            ContentItem.from_source(
                frontmatter,
                body,
                input_path=str(rel),
                modified=modified,
                languages=languages,
                default_language=default_language,
            )
        )
    logger.debug("Loaded %d content items from %s", len(items), input_dir)
    return items


def read_data_file(data_dir: Path, name: str) -> dict[str, Any]:
    """Load ``{name}.yaml``/``.yml``/``.json`` from the data directory.

    Returns an empty dict when no such file exists.
    """
    for suffix in (".yaml", ".yml", ".json"):
        path = data_dir / f"{name}{suffix}"
        if not path.is_file():
            continue
        raw = path.read_text(encoding="utf-8")
        if suffix == ".json":
            data = json.loads(raw)
        else:
            data = YAML(typ="safe", pure=True).load(raw)
        return dict(data or {})
    return {}


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def resolve_output_path(output_dir: Path, site_path: str) -> Path:
    """Map a logical site path to a file under *output_dir*.

    ``/en/blog/foo/`` -> ``{output}/en/blog/foo/index.html``;
    paths with a file extension are written as-is.
    """
    relative = site_path.lstrip("/")
    if not relative or relative.endswith("/"):
        relative += "index.html"
    elif not PurePosixPath(relative).suffix:
        relative += "/index.html"
    result = output_dir / relative

    # Guard against path traversal via crafted permalinks
    if not result.resolve().is_relative_to(output_dir.resolve()):
        msg = f"Path escapes output directory: {site_path}"
        raise ValueError(msg)
    return result


def write_page(output_dir: Path, site_path: str, html: str) -> Path:
    """Write rendered HTML for *site_path*, creating parent directories."""
    path = resolve_output_path(output_dir, site_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    return path


def write_json(path: Path, payload: Any) -> Path:
    """Write *payload* as pretty-printed UTF-8 JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


def copy_passthrough(input_dir: Path, output_dir: Path, formats: Iterable[str]) -> int:
    """Copy every non-template file from *input_dir* to *output_dir*.

    Returns the number of files copied.
    """
    suffixes = {f".{fmt}" for fmt in formats}
    copied = 0
    for path in sorted(input_dir.rglob("*")):
        if not path.is_file() or path.suffix in suffixes:
            continue
        rel = path.relative_to(input_dir)
        if any(part in _SKIP_DIRS for part in rel.parts):
            continue
        dest = output_dir / rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, dest)
        copied += 1
    return copied

"""Shared pytest fixtures and test helpers for leafpress tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from leafpress.config.settings import LeafSettings
from leafpress.domain.content import ContentItem
from leafpress.services.telemetry import _current_span, disable_telemetry

ItemFactory = Callable[..., ContentItem]

SITE_TOML = """\
[dirs]
input = "content"

[site]
url = "https://example.dev"
repo_url = "https://github.com/example/site"
repo_branch = "main"
repo_content_root = "content"
"""

FIRST_POST = """\
---
title: First Post
description: The very first one.
date: 2020-01-01
authors:
  - alice
tags:
  - performance
---
Intro paragraph.

## Getting started

```js
console.log(1);
```

{% call Aside("note") %}Remember **this**.{% endcall %}
"""

SECOND_POST = """\
---
title: Second Post
date: 2020-03-01
lighthouse:
  performance: 0.9
tags: [Performance]
---
See also:

{{ PostCard("first-post") }}

| a | b |
|---|---|
| 1 | 2 |
"""

DRAFT_POST = """\
---
title: Unfinished
date: 2020-05-01
draft: true
---
Not ready.
"""

ABOUT_PAGE = """\
---
title: About
date: 2019-01-01
permalink: /about/
---
<p>{{ collections.posts | length }} posts</p>
"""

CONTRIBUTORS = """\
alice:
  name: Alice Example
  title: Engineer
  twitter: alice
"""


def write_file(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """The CLI enables telemetry for -v; keep it from leaking between tests."""
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None]:
    """The CLI reconfigures logging on every invocation; undo it after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger("leafpress").setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("LEAFPRESS_CONFIG", "LEAFPRESS_ENV"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """A small site: three blog posts (one draft), an about page, one contributor.

    Layout::

        leafpress.toml
        _data/contributors.yaml
        content/en/blog/{first-post,second-post,draft-post}/index.md
        content/en/about.njk
    """
    write_file(tmp_path, "leafpress.toml", SITE_TOML)
    write_file(tmp_path, "_data/contributors.yaml", CONTRIBUTORS)
    write_file(tmp_path, "content/en/blog/first-post/index.md", FIRST_POST)
    write_file(tmp_path, "content/en/blog/second-post/index.md", SECOND_POST)
    write_file(tmp_path, "content/en/blog/draft-post/index.md", DRAFT_POST)
    write_file(tmp_path, "content/en/about.njk", ABOUT_PAGE)
    return tmp_path


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the sample site so the CLI discovers its leafpress.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test classes.
    """
    monkeypatch.chdir(site_root)


@pytest.fixture
def settings(site_root: Path) -> LeafSettings:
    return LeafSettings.from_cli(site_root=site_root)


@pytest.fixture
def make_item() -> ItemFactory:
    """Factory for ContentItem with sensible defaults.

    ``day`` is shorthand for a date in January 2020.
    """

    def _make(slug: str, day: int = 1, **fields: Any) -> ContentItem:
        fields.setdefault("date", datetime(2020, 1, day, tzinfo=UTC))
        fields.setdefault("path", f"/en/blog/{slug}/")
        fields.setdefault("input_path", f"en/blog/{slug}/index.md")
        return ContentItem(slug=slug, **fields)

    return _make

"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, leafpress.toml only contains
overrides.  A fresh site needs no config file at all.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

# Template engine names accepted for the html/markdown pre-processing pass.
# Jinja2 renders the Nunjucks subset the site templates use.
TEMPLATE_ENGINES = frozenset({"njk", "jinja2"})


class DirsConfig(BaseModel):
    """[dirs] section.

    ``data`` and ``includes`` are resolved relative to ``input``.
    """

    model_config = {"frozen": True}

    input: str = "src/site/content"
    output: str = "dist"
    data: str = "../_data"
    includes: str = "../_includes"


class MarkdownConfig(BaseModel):
    """[markdown] section."""

    model_config = {"frozen": True}

    anchor_level: int = Field(default=2, ge=1, le=6)
    permalink: bool = True
    permalink_class: str = "w-headline-link"
    permalink_symbol: str = "#"
    allowed_attributes: list[str] = Field(default_factory=lambda: ["id", "class"])
    allowed_attribute_patterns: list[str] = Field(default_factory=lambda: [r"^data-.*$"])
    highlight: bool = True
    code_wrapper_tag: str = "web-copy-code"
    table_wrapper_class: str = "w-table-wrapper"

    @field_validator("allowed_attribute_patterns")
    @classmethod
    def _compile_check(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                msg = f"Invalid attribute pattern {pattern!r}: {exc}"
                raise ValueError(msg) from exc
        return patterns


class CollectionsConfig(BaseModel):
    """[collections] section."""

    model_config = {"frozen": True}

    recent_window: int = Field(default=3, ge=0)
    feed_size: int = Field(default=10, ge=0)
    export_env: str = "prod"
    export_content_chars: int = Field(default=5000, gt=0)
    duplicate_slugs: Literal["error", "last_wins"] = "error"


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    url: str = "https://web.dev"
    repo_url: str = "https://github.com/GoogleChrome/web.dev"
    repo_branch: str = "master"
    repo_content_root: str = "src/site/content"
    default_language: str = "en"
    languages: list[str] = Field(
        default_factory=lambda: ["en", "es", "ja", "ko", "pl", "pt", "ru", "zh"]
    )


class BuildConfig(BaseModel):
    """[build] section."""

    model_config = {"frozen": True}

    workers: int = Field(default=1, ge=1)
    tolerate_render_errors: bool = False

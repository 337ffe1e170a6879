"""Tests for slugify and the slug index."""

from __future__ import annotations

import logging

import pytest

from leafpress.domain.errors import DuplicateSlugError, SlugNotFoundError
from leafpress.domain.slugs import build_index, slugify


class TestSlugify:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Hello, World!", "hello-world"),
            ("Crème brûlée", "creme-brulee"),
            ("  spaces   everywhere  ", "spaces-everywhere"),
            ("Already-a-slug", "already-a-slug"),
            ("C++ & Rust", "c-rust"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, text: str, expected: str) -> None:
        assert slugify(text) == expected

    def test_custom_replacement(self) -> None:
        assert slugify("a b c", replacement="_") == "a_b_c"


class TestBuildIndex:
    def test_lookup_returns_item(self, make_item) -> None:
        items = [make_item("a"), make_item("b"), make_item("c")]
        index = build_index(items)
        for item in items:
            assert index.lookup(item.slug) is item

    def test_missing_slug(self, make_item) -> None:
        index = build_index([make_item("a")])
        with pytest.raises(SlugNotFoundError) as exc_info:
            index.lookup("zzz")
        assert exc_info.value.slug == "zzz"
        assert exc_info.value.code == "SLUG_NOT_FOUND"

    def test_slug_not_found_is_lookup_error(self, make_item) -> None:
        with pytest.raises(LookupError):
            build_index([make_item("a")]).lookup("missing")

    @pytest.mark.parametrize("slug", ["", None])
    def test_empty_slug(self, make_item, slug: str | None) -> None:
        with pytest.raises(SlugNotFoundError, match="empty"):
            build_index([make_item("a")]).lookup(slug)

    def test_get_is_optional_lookup(self, make_item) -> None:
        index = build_index([make_item("a")])
        assert index.get("missing") is None
        assert "a" in index
        assert len(index) == 1

    def test_empty_input(self) -> None:
        assert len(build_index([])) == 0

    def test_duplicates_error_by_default(self, make_item) -> None:
        first = make_item("dup", input_path="en/one.md")
        second = make_item("dup", input_path="en/two.md")
        with pytest.raises(DuplicateSlugError) as exc_info:
            build_index([first, second])
        err = exc_info.value
        assert err.slug == "dup"
        assert err.paths == ("en/one.md", "en/two.md")
        assert "en/one.md" in str(err)
        assert "en/two.md" in str(err)

    def test_duplicates_last_wins(self, make_item, caplog: pytest.LogCaptureFixture) -> None:
        first = make_item("dup", input_path="en/one.md")
        second = make_item("dup", input_path="en/two.md")
        with caplog.at_level(logging.WARNING, logger="leafpress.domain.slugs"):
            index = build_index([first, second], duplicates="last_wins")
        assert index.lookup("dup") is second
        assert "Duplicate slug 'dup'" in caplog.text

    def test_unknown_policy(self, make_item) -> None:
        with pytest.raises(ValueError, match="policy"):
            build_index([make_item("a")], duplicates="first_wins")  # type: ignore[arg-type]

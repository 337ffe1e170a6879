"""Tests for ServiceResult and ServiceError."""

import pytest
from pydantic import ValidationError

from leafpress.domain.errors import DuplicateSlugError, LeafpressError, RenderError
from leafpress.services.result import ServiceError, ServiceResult


class TestServiceError:
    def test_from_exception(self) -> None:
        error = ServiceError.from_exception(DuplicateSlugError("a", "x.md", "y.md"))
        assert error.code == "DUPLICATE_SLUG"
        assert "x.md" in error.message
        assert error.detail == {"slug": "a", "paths": ["x.md", "y.md"]}

    def test_base_error_has_no_detail(self) -> None:
        error = ServiceError.from_exception(LeafpressError("broken"))
        assert error.code == "BUILD_ERROR"
        assert error.detail == {}


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="build")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure(self) -> None:
        exc = RenderError("YouTube", "en/a.md", "missing required argument 'id'")
        result = ServiceResult.failure("build", exc, warnings=["Skipped en/b.md"])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "RENDER_ERROR"
        assert result.error.detail == {"component": "YouTube", "page": "en/a.md"}
        assert result.warnings == ["Skipped en/b.md"]

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="build")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(ok=True, op="lookup", data={"slug": "a"})
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result

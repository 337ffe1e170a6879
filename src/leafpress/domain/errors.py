"""Build error taxonomy.

Every error is a deterministic function of the (immutable) input tree, so
none of them is ever retried.  Services translate these into a
:class:`~leafpress.services.result.ServiceError` using :attr:`code`.
"""

from __future__ import annotations

from typing import Any


class LeafpressError(Exception):
    """Base class for all build-time errors."""

    code = "BUILD_ERROR"

    def detail(self) -> dict[str, Any]:
        """Structured payload for ``ServiceError.detail``."""
        return {}


class ConfigurationError(LeafpressError):
    """A recognized option is malformed (e.g. a non-positive page size)."""

    code = "CONFIG_ERROR"


class SlugNotFoundError(LeafpressError, LookupError):
    """No content item is indexed under the requested slug.

    Recoverable: templates may render a placeholder instead of failing.
    """

    code = "SLUG_NOT_FOUND"

    def __init__(self, slug: str | None) -> None:
        self.slug = slug
        if not slug:
            msg = "Slug is empty or missing"
        else:
            msg = f"Could not find a content item with the slug: {slug!r}"
        super().__init__(msg)

    def detail(self) -> dict[str, Any]:
        return {"slug": self.slug}


class DuplicateSlugError(LeafpressError):
    """Two content items share a slug under the ``error`` duplicate policy."""

    code = "DUPLICATE_SLUG"

    def __init__(self, slug: str, first_path: str, second_path: str) -> None:
        self.slug = slug
        self.paths = (first_path, second_path)
        super().__init__(f"Found duplicate slug {slug!r} in {first_path} and {second_path}")

    def detail(self) -> dict[str, Any]:
        return {"slug": self.slug, "paths": list(self.paths)}


class UnknownComponentError(LeafpressError):
    """A template invoked a component that was never registered."""

    code = "UNKNOWN_COMPONENT"

    def __init__(self, name: str, page: str | None = None) -> None:
        self.name = name
        self.page = page
        msg = f"Unknown component {name!r}"
        if page:
            msg += f" in {page}"
        super().__init__(msg)

    def detail(self) -> dict[str, Any]:
        return {"component": self.name, "page": self.page}


class RenderError(LeafpressError):
    """A component rejected its arguments while rendering a page."""

    code = "RENDER_ERROR"

    def __init__(self, component: str, page: str | None, message: str) -> None:
        self.component = component
        self.page = page
        self.message = message
        super().__init__(f"{component} failed on {page or '<unknown page>'}: {message}")

    def detail(self) -> dict[str, Any]:
        return {"component": self.component, "page": self.page}

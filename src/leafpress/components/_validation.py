"""Argument checks shared by the built-in components.

Components raise ``ValueError``; the registry turns it into a
``RenderError`` carrying the component name and page path.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Any


def require(field: str, value: Any) -> Any:
    """Return *value*, or fail when it is missing or blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        msg = f"missing required argument {field!r}"
        raise ValueError(msg)
    return value


def choice(field: str, value: str, allowed: Collection[str]) -> str:
    """Return *value* when it is one of *allowed*."""
    if value not in allowed:
        formatted = ", ".join(sorted(allowed))
        msg = f"{field}={value!r} is not one of: {formatted}"
        raise ValueError(msg)
    return value

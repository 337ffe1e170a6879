"""Shared Jinja2 template loading with per-site include overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader, Undefined

from leafpress.domain.errors import UnknownComponentError


class ComponentUndefined(Undefined):
    """Undefined that fails loudly when a template *calls* it.

    Reading a missing variable stays lenient (``{% if page.hero %}``), but
    ``{{ Missing() }}`` or ``{% call Missing() %}`` is a broken component
    reference and must abort the build rather than render blank.
    """

    __slots__ = ()

    # Context.call reads this attribute before calling; answering here keeps
    # that lookup from tripping the generic UndefinedError first.
    jinja_pass_arg = None

    def __call__(self, *args: Any, **kwargs: Any) -> NoReturn:
        name = self._undefined_name or "<anonymous>"
        raise UnknownComponentError(name)


def build_template_environment(*, includes_dir: Path | None = None) -> Environment:
    """Build a Jinja2 environment with site includes before packaged defaults.

    Site layouts and partials are loaded from the includes directory
    (``dirs.includes``); the packaged ``templates/`` directory supplies a
    fallback ``layouts/default.html``.
    """

    loaders: list[BaseLoader] = []
    if includes_dir is not None:
        loaders.append(FileSystemLoader(str(includes_dir)))

    loaders.append(PackageLoader("leafpress", "templates"))
    return Environment(
        loader=ChoiceLoader(loaders),
        undefined=ComponentUndefined,
        autoescape=True,
        keep_trailing_newline=True,
    )

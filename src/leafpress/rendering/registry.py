"""Component/shortcode and filter registry.

A Registry is an explicit value created by :func:`create_registry` and
installed into one Jinja2 environment per build; there is no ambient
global registry.

Components come in two kinds:

- ``single``: ``{{ YouTube(id="abc") }}`` — arguments only.
- ``paired``: ``{% call Aside("note") %}...{% endcall %}`` — the nested
  block is rendered first and passed as the first positional argument.

INVARIANT: an unknown component name is always fatal
(:class:`UnknownComponentError`); a component that rejects its arguments
raises :class:`RenderError` naming the component and the page.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from jinja2 import Environment, pass_context
from jinja2.runtime import Context
from markupsafe import Markup

from leafpress.domain.errors import (
    LeafpressError,
    RenderError,
    SlugNotFoundError,
    UnknownComponentError,
)

if TYPE_CHECKING:
    from leafpress.plugins.manager import PluginManager
    from leafpress.rendering.markdown import MarkdownRenderer
    from leafpress.rendering.site import SiteData

ComponentKind = Literal["single", "paired"]

# Template variable holding the ComponentStash of the page being rendered.
STASH_VAR = "_component_stash"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Component:
    """A registered component.

    Attributes:
        needs_page: Pass the current page as ``page=`` keyword argument.
    """

    name: str
    fn: Callable[..., str]
    kind: ComponentKind = "single"
    needs_page: bool = False


def page_path(page: Any) -> str | None:
    """Best-effort identifier of *page* for error messages."""
    if page is None:
        return None
    for attr in ("input_path", "url"):
        value = getattr(page, attr, None)
        if value:
            return str(value)
    if isinstance(page, dict):
        return page.get("input_path") or page.get("url")
    return None


def _check_name(name: str) -> str:
    normalized = name.strip()
    if not normalized:
        msg = "Registration name must not be empty"
        raise ValueError(msg)
    if not normalized.isidentifier():
        msg = f"Registration name {normalized!r} is not a valid template identifier"
        raise ValueError(msg)
    return normalized


class ComponentStash:
    """Component HTML held back from a page's markdown pass.

    Inside a markdown body each component call is replaced by an opaque
    alphanumeric key; :meth:`restore` swaps the HTML back in after the
    markdown pass, so fenced code inside a paired component is never
    re-parsed as markdown.
    """

    def __init__(self) -> None:
        self._nonce = secrets.token_hex(6)
        self._held: list[str] = []

    def hold(self, html: str) -> Markup:
        key = f"leafpresscomponent{self._nonce}x{len(self._held)}x"
        self._held.append(str(html))
        return Markup(key)

    def restore(self, html: str) -> str:
        # Later keys belong to enclosing components, whose HTML may carry
        # the keys of the components nested in them.
        for index in reversed(range(len(self._held))):
            key = f"leafpresscomponent{self._nonce}x{index}x"
            fragment = self._held[index]
            html = html.replace(f"<p>{key}</p>", fragment).replace(key, fragment)
        return html


class Registry:
    """Name-keyed components and filters for one build."""

    def __init__(self) -> None:
        self._components: dict[str, Component] = {}
        self._filters: dict[str, Callable[..., Any]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_component(
        self,
        name: str,
        fn: Callable[..., str],
        kind: ComponentKind = "single",
        *,
        needs_page: bool = False,
    ) -> None:
        """Register a component.

        Raises:
            ValueError: Empty/invalid or duplicate name, unknown kind.
            TypeError: *fn* is not callable.
        """
        normalized = _check_name(name)
        if kind not in ("single", "paired"):
            msg = f"Component {normalized!r} has unknown kind {kind!r}"
            raise ValueError(msg)
        if not callable(fn):
            msg = f"Component {normalized!r} must be callable"
            raise TypeError(msg)
        if normalized in self._components:
            msg = f"Component {normalized!r} is already registered"
            raise ValueError(msg)
        self._components[normalized] = Component(normalized, fn, kind, needs_page)
        logger.debug("Registered %s component: %s", kind, normalized)

    def register_filter(self, name: str, fn: Callable[..., Any]) -> None:
        """Register a template filter.

        Raises:
            ValueError: Empty/invalid or duplicate name.
            TypeError: *fn* is not callable.
        """
        normalized = _check_name(name)
        if not callable(fn):
            msg = f"Filter {normalized!r} must be callable"
            raise TypeError(msg)
        if normalized in self._filters:
            msg = f"Filter {normalized!r} is already registered"
            raise ValueError(msg)
        self._filters[normalized] = fn

    # ------------------------------------------------------------------
    # Lookup and invocation
    # ------------------------------------------------------------------

    @property
    def component_names(self) -> list[str]:
        return sorted(self._components)

    @property
    def filter_names(self) -> list[str]:
        return sorted(self._filters)

    def get_filter(self, name: str) -> Callable[..., Any]:
        return self._filters[name]

    def component(self, name: str, *, page: Any = None) -> Component:
        """Return the component registered as *name*.

        Raises:
            UnknownComponentError: If no such component exists.
        """
        try:
            return self._components[name]
        except KeyError:
            raise UnknownComponentError(name, page_path(page)) from None

    def invoke(
        self,
        name: str,
        *args: Any,
        content: str | None = None,
        page: Any = None,
        **kwargs: Any,
    ) -> Markup:
        """Render component *name* to an HTML fragment.

        Raises:
            UnknownComponentError: If *name* is not registered.
            RenderError: If the component rejects its arguments, or nested
                content is missing (paired) or unexpected (single).
        """
        component = self.component(name, page=page)
        where = page_path(page)

        if component.kind == "paired":
            if content is None:
                raise RenderError(name, where, "paired component requires nested content")
            args = (content, *args)
        elif content is not None:
            raise RenderError(name, where, "component does not accept nested content")

        if component.needs_page:
            kwargs["page"] = page

        try:
            return Markup(component.fn(*args, **kwargs))
        except SlugNotFoundError as exc:
            raise RenderError(name, where, str(exc)) from exc
        except LeafpressError:
            raise
        except (ValueError, TypeError, KeyError) as exc:
            raise RenderError(name, where, str(exc)) from exc

    # ------------------------------------------------------------------
    # Jinja2 integration
    # ------------------------------------------------------------------

    def install(self, env: Environment) -> None:
        """Expose filters and components on a Jinja2 environment."""
        env.filters.update(self._filters)
        for name in self._components:
            env.globals[name] = self._template_callable(name)

    def _template_callable(self, name: str) -> Callable[..., Markup]:
        registry = self

        @pass_context
        def call(context: Context, *args: Any, **kwargs: Any) -> Markup:
            caller = kwargs.pop("caller", None)
            content = str(caller()) if caller is not None else None
            html = registry.invoke(
                name, *args, content=content, page=context.get("page"), **kwargs
            )
            stash = context.get(STASH_VAR)
            return stash.hold(html) if stash is not None else html

        call.__name__ = name
        return call


def create_registry(
    site: SiteData,
    *,
    markdown: MarkdownRenderer,
    plugins: PluginManager | None = None,
) -> Registry:
    """Build the registry for one build: built-ins first, then plugins."""
    from leafpress.components import register_builtin_components
    from leafpress.rendering.filters import builtin_filters

    registry = Registry()
    filters = builtin_filters(
        site.settings,
        index=site.index,
        contributors=site.contributors,
        markdown=markdown,
    )
    for name, fn in filters.items():
        registry.register_filter(name, fn)
    register_builtin_components(registry, site, markdown=markdown)

    if plugins is not None:
        plugins.register_extensions(registry, site)
    return registry

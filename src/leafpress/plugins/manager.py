"""Plugin discovery, loading, and extension collection.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery from ``.leafpress/plugins/``.
Capabilities: components, filters, collections, markdown render rules,
post-build notification.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pluggy

from leafpress.plugins.hookspecs import LeafpressHookSpec

if TYPE_CHECKING:
    from leafpress.domain.content import ContentItem
    from leafpress.rendering.registry import Registry
    from leafpress.rendering.site import SiteData

PROJECT_NAME = "leafpress"
ENTRY_POINT_GROUP = "leafpress.plugins"
LOCAL_PLUGIN_DIR = Path(".leafpress") / "plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(LeafpressHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of loaded plugin names.
        """
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load entry-point plugins", exc_info=True)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [name for _plugin, name in self._plugins()]

    # ------------------------------------------------------------------
    # Extension collection
    # ------------------------------------------------------------------

    def register_extensions(self, registry: Registry, site: SiteData) -> None:
        """Let every plugin add components and filters to *registry*.

        A plugin whose registration fails (name clash, bad callable, or any
        error of its own) is skipped with a warning; the other plugins and
        the built-ins are unaffected.
        """
        for plugin, name in self._plugins():
            for hook_name in ("register_components", "register_filters"):
                self._call(plugin, name, hook_name, registry=registry, site=site)

    def collect_render_rules(self) -> dict[str, Any]:
        """Merge markdown render rules from all plugins, in registration order."""
        rules: dict[str, Any] = {}
        for plugin, name in self._plugins():
            result = self._call(plugin, name, "markdown_render_rules")
            if result is None:
                continue
            if not isinstance(result, dict):
                logger.warning("Plugin %s returned non-dict markdown render rules", name)
                continue
            for rule_name, rule in result.items():
                if not callable(rule):
                    logger.warning(
                        "Skipping non-callable render rule %r from plugin %s", rule_name, name
                    )
                    continue
                rules[rule_name] = rule
        return rules

    def collect_collections(
        self,
        items: Sequence[ContentItem],
        env: str | None,
    ) -> dict[str, tuple[ContentItem, ...]]:
        """Collect extra collections from all plugins.

        Two plugins contributing the same name is a warning; the first wins.
        """
        extra: dict[str, tuple[ContentItem, ...]] = {}
        for plugin, name in self._plugins():
            result = self._call(plugin, name, "register_collections", items=items, env=env)
            if result is None:
                continue
            if not isinstance(result, dict):
                logger.warning("Plugin %s returned non-dict collections", name)
                continue
            for collection_name, members in result.items():
                if collection_name in extra:
                    logger.warning(
                        "Plugin %s redefines collection %r; keeping the first definition",
                        name,
                        collection_name,
                    )
                    continue
                extra[collection_name] = tuple(members)
        return extra

    def notify_post_build(self, output_dir: Path, page_count: int) -> None:
        for plugin, name in self._plugins():
            self._call(plugin, name, "post_build", output_dir=output_dir, page_count=page_count)

    # ------------------------------------------------------------------
    # Dispatch helpers
    # ------------------------------------------------------------------

    def _plugins(self) -> list[tuple[object, str]]:
        """Registered plugins with their names, in registration order."""
        return [
            (plugin, name)
            for name, plugin in self._pm.list_name_plugin()
            if plugin is not None
        ]

    @staticmethod
    def _call(plugin: object, plugin_name: str, hook_name: str, **kwargs: Any) -> Any:
        """Call one hook on one plugin, converting failures into warnings."""
        hook: Callable[..., Any] | None = getattr(plugin, hook_name, None)
        if hook is None or not getattr(hook, f"{PROJECT_NAME}_impl", None):
            return None
        try:
            return hook(**kwargs)
        except Exception:
            logger.warning(
                "Plugin %s failed in %s",
                plugin_name,
                hook_name,
                exc_info=True,
            )
            return None

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module; classes in it carrying ``@hookimpl`` methods are instantiated
        and registered. Errors are logged as warnings, never raised.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"leafpress_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry points may name a class; calling hooks on the class would leave
        ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            self._pm.register(instance, name=plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* has any public method decorated with ``@hookimpl``."""
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, f"{PROJECT_NAME}_impl", None):
                return True
        return False

"""Extension layer — plugin system via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

from leafpress.plugins.hookspecs import hookimpl
from leafpress.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]

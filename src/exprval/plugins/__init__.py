"""Extension layer: plugin system via pluggy.

Plugins add predicates and formats to the validation registry.
INVARIANT: Plugin failures are warnings, never errors.
"""

from exprval.plugins.hookspecs import hookimpl
from exprval.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]

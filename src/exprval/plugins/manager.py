"""Plugin discovery and registry assembly.

Discovery: entry points in the ``exprval.plugins`` group (pip-installed)
plus single-file plugins from a local directory (``.exprval/plugins/`` by
default).

INVARIANT: plugin failures are warnings, never errors. A plugin that
cannot be imported, instantiated or asked for its contributions is
skipped, and so is any malformed entry it returns.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import re
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pluggy

from exprval.plugins.hookspecs import PROJECT_NAME, ExprvalHookSpec
from exprval.validation.registry import Registry

ENTRY_POINT_GROUP = "exprval.plugins"

_NAME = re.compile(r"[A-Za-z0-9_]+")

logger = logging.getLogger(__name__)


class PluginManager:
    """Discovers plugins and merges their contributions into a registry."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ExprvalHookSpec)
        self._loaded = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then single-file plugins from *local_dir*.

        Returns the names of all registered plugins.
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

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def list_plugin_names(self) -> list[str]:
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    # ------------------------------------------------------------------
    # Registry assembly
    # ------------------------------------------------------------------

    def build_registry(self, base: Registry | None = None) -> Registry:
        """Layer every plugin's predicates and formats over *base*.

        *base* defaults to the built-in registry. Plugins are applied in
        registration order, so a later plugin wins a name clash.
        """
        predicates: dict[str, Callable[..., bool]] = {}
        formats: dict[str, Callable[[str], bool]] = {}
        for name, plugin in self._pm.list_name_plugin():
            if plugin is None:  # blocked
                continue
            predicates.update(self._collect(plugin, name, "exprval_predicates"))
            formats.update(self._collect(plugin, name, "exprval_formats"))

        registry = base if base is not None else Registry.default()
        if not predicates and not formats:
            return registry
        logger.debug(
            "Plugins contributed %d predicate(s) and %d format(s)",
            len(predicates),
            len(formats),
        )
        return registry.extend(predicates=predicates, formats=formats)

    @staticmethod
    def _collect(plugin: object, plugin_name: str, hook_name: str) -> dict[str, Any]:
        """Call one hook on one plugin, keeping only well-formed entries."""
        hook = getattr(plugin, hook_name, None)
        if hook is None:
            return {}

        try:
            contributed = hook()
        except Exception:
            logger.warning(
                "Plugin %s failed in %s",
                plugin_name,
                hook_name,
                exc_info=True,
            )
            return {}

        if contributed is None:
            return {}
        if not isinstance(contributed, dict):
            logger.warning("Plugin %s returned a non-dict from %s", plugin_name, hook_name)
            return {}

        accepted: dict[str, Any] = {}
        for entry_name, fn in contributed.items():
            if not isinstance(entry_name, str) or not _NAME.fullmatch(entry_name):
                logger.warning("Skipping %r from plugin %s: invalid name", entry_name, plugin_name)
            elif not callable(fn):
                logger.warning("Skipping %r from plugin %s: not callable", entry_name, plugin_name)
            else:
                accepted[entry_name] = fn
        return accepted

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Load every ``*.py`` in *local_dir* (skipping ``_``-prefixed files).

        Classes defined in a module that carry ``@hookimpl`` methods are
        instantiated and registered.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"exprval_local_plugin_{py_file.stem}"
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
                if obj.__module__ != module_name or not self._has_hook_impls(obj):
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
        """Replace entry-point plugin classes with instances.

        Hook methods on a registered class object would be called unbound.
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
        """Whether *cls* has a method decorated with ``@hookimpl``."""
        marker = f"{PROJECT_NAME}_impl"
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, marker, None):
                return True
        return False

"""Pluggy hook specifications for extending the validation registry.

Plugins contribute predicates (new rule names) and formats (new names for
the ``format=`` rule). Contributions are collected once, when the CLI
builds its :class:`~exprval.validation.registry.Registry`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from exprval.validation.formats import FormatFn
    from exprval.validation.predicates import PredicateFn

PROJECT_NAME = "exprval"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ExprvalHookSpec:
    """Hook specifications for the exprval plugin system."""

    @hookspec
    def exprval_predicates(self) -> dict[str, PredicateFn] | None:
        """Return rule name -> predicate mappings to add to the registry."""

    @hookspec
    def exprval_formats(self) -> dict[str, FormatFn] | None:
        """Return format name -> check mappings for the ``format`` rule."""

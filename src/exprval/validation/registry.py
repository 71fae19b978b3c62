"""Immutable predicate and format tables.

A registry is built once (usually :meth:`Registry.default`, optionally
extended by plugins) and handed to a :class:`~exprval.validation.evaluator.Validator`.
Nothing here is global or mutable after construction.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from exprval.validation.formats import BUILTIN_FORMATS, FormatFn
from exprval.validation.predicates import (
    BUILTIN_PREDICATES,
    FORMAT_RULE,
    PredicateFn,
    format_predicate,
)


class Registry:
    """Read-only predicate and format tables.

    The ``format`` predicate is bound to this registry's format table
    unless *predicates* supplies its own.
    """

    __slots__ = ("_predicates", "_formats")

    def __init__(
        self,
        predicates: Mapping[str, PredicateFn] | None = None,
        formats: Mapping[str, FormatFn] | None = None,
    ) -> None:
        format_table = dict(formats or {})
        predicate_table = dict(predicates or {})
        predicate_table.setdefault(FORMAT_RULE, format_predicate(MappingProxyType(format_table)))
        self._formats: Mapping[str, FormatFn] = MappingProxyType(format_table)
        self._predicates: Mapping[str, PredicateFn] = MappingProxyType(predicate_table)

    @classmethod
    def default(cls) -> Registry:
        """The built-in predicates and formats."""
        return cls(BUILTIN_PREDICATES, BUILTIN_FORMATS)

    @property
    def predicates(self) -> Mapping[str, PredicateFn]:
        return self._predicates

    @property
    def formats(self) -> Mapping[str, FormatFn]:
        return self._formats

    def predicate(self, name: str) -> PredicateFn | None:
        return self._predicates.get(name)

    def extend(
        self,
        *,
        predicates: Mapping[str, PredicateFn] | None = None,
        formats: Mapping[str, FormatFn] | None = None,
    ) -> Registry:
        """Return a new registry with extra entries layered over this one.

        Later entries win on name clashes. The ``format`` predicate is
        rebound to the merged format table unless *predicates* overrides it.
        """
        merged_predicates = {
            name: fn for name, fn in self._predicates.items() if name != FORMAT_RULE
        }
        merged_predicates.update(predicates or {})
        merged_formats = {**self._formats, **(formats or {})}
        return Registry(merged_predicates, merged_formats)

    def __repr__(self) -> str:
        return f"Registry(predicates={len(self._predicates)}, formats={len(self._formats)})"

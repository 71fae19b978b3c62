"""Value kinds recognised by the structural evaluator.

The set is closed: every value under validation resolves to exactly one
kind, and the evaluator dispatches on it.
"""

from __future__ import annotations

from enum import StrEnum


class Kind(StrEnum):
    """Shape of a value as seen by predicates and the evaluator."""

    INTEGER = "integer"
    UNSIGNED = "unsigned"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    OPTIONAL = "optional"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"
    OTHER = "other"


SCALAR_KINDS: frozenset[Kind] = frozenset(
    {Kind.INTEGER, Kind.UNSIGNED, Kind.FLOAT, Kind.STRING, Kind.BOOLEAN, Kind.OTHER}
)

SIZED_KINDS: frozenset[Kind] = frozenset({Kind.STRING, Kind.SEQUENCE, Kind.MAPPING})

"""Where a record field's expression comes from.

Three ways to attach an expression to a field::

    @dataclass
    class Server:
        port: Annotated[int, Expr("gte=1 & lte=65535")]
        hosts: list[str] = field(default_factory=list, metadata={"validate": "empty=false"})

    class Account(BaseModel):
        email: Annotated[str, Expr("format=email")]
        age: int = Field(json_schema_extra={"validate": "gte=0 & lte=150"})

A :class:`RecordView` additionally presents a plain mapping (a parsed
JSON/TOML/YAML document) as a record whose expressions come from a
separate rules table.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin

DEFAULT_METADATA_KEY = "validate"


@dataclass(frozen=True)
class Expr:
    """``Annotated`` marker carrying a field's constraint expression."""

    expression: str


def expression_from_hint(hint: Any) -> str | None:
    """Return the first :class:`Expr` marker found on an ``Annotated`` hint."""
    if get_origin(hint) is not Annotated:
        return None
    for marker in get_args(hint)[1:]:
        if isinstance(marker, Expr):
            return marker.expression
    return None


def expression_from_markers(markers: list[Any] | tuple[Any, ...]) -> str | None:
    """Return the first :class:`Expr` in a pydantic ``FieldInfo.metadata`` list."""
    for marker in markers:
        if isinstance(marker, Expr):
            return marker.expression
    return None


def expression_from_metadata(metadata: Mapping[str, Any] | None, key: str) -> str | None:
    """Return ``metadata[key]`` when it is a string expression."""
    if not metadata:
        return None
    value = metadata.get(key)
    return value if isinstance(value, str) else None


class RecordView:
    """Present a mapping as a record with externally supplied expressions.

    Fields are the mapping's keys in insertion order, followed by any key
    that only appears in *expressions* (visited with the value ``None`` so
    ``nil=false`` can report it as missing).
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        expressions: Mapping[str, str] | None = None,
        *,
        name: str = "record",
    ) -> None:
        self._data = data
        self._expressions = dict(expressions or {})
        self.name = name

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    def fields(self) -> Iterator[tuple[str, str, Any]]:
        """Yield ``(field_name, expression, value)`` triples."""
        seen = set()
        for key, value in self._data.items():
            seen.add(str(key))
            yield str(key), self._expressions.get(str(key), ""), value
        for key, expression in self._expressions.items():
            if key not in seen:
                yield key, expression, None

    def __repr__(self) -> str:
        return f"RecordView({self.name!r}, fields={len(self._data)})"

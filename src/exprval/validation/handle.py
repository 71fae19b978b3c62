"""A shape-aware wrapper over any value under validation.

A handle pairs a runtime value with the type hint it was declared with
(when one is known). The hint refines what the runtime value alone
cannot say: ``int | None`` marks an optional, ``UInt`` marks an unsigned
integer, and ``list[X]`` / ``dict[K, V]`` type the members.

The evaluator only ever talks to handles, never to dataclasses or
pydantic internals directly.
"""

from __future__ import annotations

import builtins
import dataclasses
import sys
import types
import typing
from collections.abc import Iterator, Mapping, Sequence, Set
from datetime import timedelta
from typing import Annotated, Any, NewType, Union, get_args, get_origin

from pydantic import BaseModel

from exprval.domain.kinds import Kind
from exprval.validation.annotations import (
    DEFAULT_METADATA_KEY,
    RecordView,
    expression_from_hint,
    expression_from_markers,
    expression_from_metadata,
)

UInt = NewType("UInt", int)
"""Declare an ``int`` field as unsigned: parameters must parse as non-negative."""

_NONE_TYPE = type(None)


def strip_annotated(hint: Any) -> Any:
    """Drop ``Annotated[...]`` wrappers, keeping the underlying type."""
    while get_origin(hint) is Annotated:
        hint = get_args(hint)[0]
    return hint


def optional_inner(hint: Any) -> Any | None:
    """Return ``X`` for an ``X | None`` hint, else None."""
    hint = strip_annotated(hint)
    if get_origin(hint) not in (Union, types.UnionType):
        return None
    args = get_args(hint)
    if _NONE_TYPE not in args:
        return None
    rest = tuple(arg for arg in args if arg is not _NONE_TYPE)
    if len(rest) == 1:
        return rest[0]
    return Union[rest]  # noqa: UP007


def describe_hint(hint: Any) -> str:
    """Render a type hint the way it would be written in source."""
    hint = strip_annotated(hint)
    if isinstance(hint, type) and not get_args(hint):
        return hint.__name__
    if isinstance(hint, NewType):
        return hint.__name__
    return repr(hint).replace("typing.", "")


def is_record(value: Any) -> bool:
    """Whether *value* is visited field by field."""
    if isinstance(value, type):
        return False
    return (
        isinstance(value, (BaseModel, RecordView))
        or dataclasses.is_dataclass(value)
    )


class ValueHandle:
    """A value of known shape, as seen by predicates and the evaluator."""

    __slots__ = ("value", "hint", "kind", "metadata_key")

    def __init__(
        self,
        value: Any,
        hint: Any = None,
        *,
        metadata_key: str = DEFAULT_METADATA_KEY,
    ) -> None:
        self.value = value
        self.hint = None if hint is Any else strip_annotated(hint)
        self.metadata_key = metadata_key
        self.kind = self._resolve_kind()

    def __repr__(self) -> str:
        return f"ValueHandle({self.value!r}, kind={self.kind.value})"

    # ------------------------------------------------------------------
    # Kind resolution
    # ------------------------------------------------------------------

    def _resolve_kind(self) -> Kind:
        value = self.value
        if optional_inner(self.hint) is not None or value is None:
            return Kind.OPTIONAL
        if isinstance(value, bool):
            return Kind.BOOLEAN
        if isinstance(value, timedelta):
            return Kind.INTEGER
        if isinstance(value, int):
            return Kind.UNSIGNED if self.hint is UInt else Kind.INTEGER
        if isinstance(value, float):
            return Kind.FLOAT
        if isinstance(value, str):
            return Kind.STRING
        if is_record(value):
            return Kind.RECORD
        if isinstance(value, Mapping):
            return Kind.MAPPING
        if isinstance(value, (bytes, bytearray, Sequence, Set)):
            return Kind.SEQUENCE
        return Kind.OTHER

    @property
    def is_duration(self) -> bool:
        """Duration-like integers take duration parameters (``1h30m``)."""
        return isinstance(self.value, timedelta)

    @property
    def type_description(self) -> str:
        if self.hint is not None:
            return describe_hint(self.hint)
        return type(self.value).__name__

    # ------------------------------------------------------------------
    # Scalar accessors
    # ------------------------------------------------------------------

    def length(self) -> int:
        return len(self.value)

    def as_integer(self) -> int:
        return int(self.value)

    def as_unsigned(self) -> int:
        return int(self.value)

    def as_float(self) -> float:
        return float(self.value)

    def as_string(self) -> str:
        return str(self.value)

    def as_boolean(self) -> bool:
        return bool(self.value)

    def as_duration(self) -> timedelta:
        return self.value

    # ------------------------------------------------------------------
    # Optional
    # ------------------------------------------------------------------

    def is_absent(self) -> bool:
        return self.value is None

    def deref(self) -> ValueHandle:
        """Handle over the present value, typed with the non-None hint."""
        return self._child(self.value, optional_inner(self.hint))

    # ------------------------------------------------------------------
    # Composites
    # ------------------------------------------------------------------

    def items(self) -> Iterator[tuple[ValueHandle, ValueHandle]]:
        """Yield ``(key, value)`` handle pairs of a mapping."""
        key_hint, value_hint = self._member_hints(2)
        for key, value in self.value.items():
            yield self._child(key, key_hint), self._child(value, value_hint)

    def elements(self) -> Iterator[ValueHandle]:
        """Yield handles over the members of a sequence, in order."""
        hint = self.hint
        args = get_args(hint) if hint is not None else ()
        if get_origin(hint) is tuple and args and args[-1] is not Ellipsis:
            for element, element_hint in zip(self.value, args, strict=False):
                yield self._child(element, element_hint)
            return
        (element_hint,) = self._member_hints(1)
        for element in self.value:
            yield self._child(element, element_hint)

    def fields(self) -> Iterator[tuple[str, str, ValueHandle]]:
        """Yield ``(field_name, expression, handle)`` for every record field.

        Underscore-prefixed fields, ``repr=False`` fields and pydantic
        private attributes are included.
        """
        value = self.value
        if isinstance(value, RecordView):
            for name, expression, member in value.fields():
                yield name, expression, self._child(member, None)
        elif isinstance(value, BaseModel):
            yield from self._model_fields(value)
        else:
            yield from self._dataclass_fields(value)

    def _dataclass_fields(self, value: Any) -> Iterator[tuple[str, str, ValueHandle]]:
        hints = _type_hints(type(value))
        for item in dataclasses.fields(value):
            hint = hints.get(item.name)
            expression = expression_from_hint(hint)
            if expression is None:
                expression = expression_from_metadata(item.metadata, self.metadata_key)
            member = getattr(value, item.name)
            yield item.name, expression or "", self._child(member, hint)

    def _model_fields(self, value: BaseModel) -> Iterator[tuple[str, str, ValueHandle]]:
        for name, info in type(value).model_fields.items():
            expression = expression_from_markers(info.metadata)
            if expression is None and isinstance(info.json_schema_extra, Mapping):
                expression = expression_from_metadata(info.json_schema_extra, self.metadata_key)
            yield name, expression or "", self._child(getattr(value, name), info.annotation)
        for name, member in (value.__pydantic_private__ or {}).items():
            yield name, "", self._child(member, None)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _child(self, value: Any, hint: Any) -> ValueHandle:
        return ValueHandle(value, hint, metadata_key=self.metadata_key)

    def _member_hints(self, count: int) -> tuple[Any, ...]:
        """Type arguments of ``list[X]`` / ``dict[K, V]`` style hints."""
        if isinstance(self.value, (bytes, bytearray)):
            return (int,) * count
        args = get_args(self.hint) if self.hint is not None else ()
        if len(args) == count:
            return args
        if count == 1 and len(args) == 2 and args[1] is Ellipsis:
            return (args[0],)
        return (None,) * count


class _HintNamespace(dict):
    """Locals for evaluating annotation strings.

    Falls through to the module globals and builtins; a name found in none
    of them (a ``TYPE_CHECKING``-only import, a class local to a function)
    evaluates as ``Any``.
    """

    def __init__(self, globalns: Mapping[str, Any], localns: Mapping[str, Any]) -> None:
        super().__init__(localns)
        self._globalns = globalns

    def __missing__(self, key: str) -> Any:
        if key in self._globalns:
            return self._globalns[key]
        if hasattr(builtins, key):
            return getattr(builtins, key)
        return Any


def _raw_annotations(klass: type) -> dict[str, Any]:
    try:
        return dict(getattr(klass, "__annotations__", {}))
    except NameError:
        # Deferred annotations (3.14+) that name an undefined type.
        import annotationlib

        return annotationlib.get_annotations(klass, format=annotationlib.Format.STRING)


def _eval_hint(hint: Any, namespace: _HintNamespace) -> Any:
    if not isinstance(hint, str):
        return hint
    try:
        return eval(hint, {"__builtins__": builtins}, namespace)  # noqa: S307
    except Exception:  # noqa: BLE001 - e.g. attribute access on an unknown module
        return None


def _type_hints(cls: type) -> dict[str, Any]:
    """Resolve a dataclass's hints, keeping ``Annotated`` extras.

    When ``typing.get_type_hints`` cannot resolve every hint, each field is
    resolved on its own so that one bad hint does not hide the
    expressions on the others.
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        pass
    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        module = sys.modules.get(klass.__module__)
        namespace = _HintNamespace(vars(module) if module else {}, vars(klass))
        for name, hint in _raw_annotations(klass).items():
            hints[name] = _eval_hint(hint, namespace)
    return hints

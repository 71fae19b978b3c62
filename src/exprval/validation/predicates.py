"""Built-in predicates: the fixed set of comparison and shape checks.

CONTRACT: a predicate receives a :class:`ValueHandle` and the rule's raw
parameter. It returns True when the value passes and False when it
fails; the evaluator turns False into a ``ValidationError``. A parameter
that cannot be parsed for the value's kind, or a rule that makes no sense
for the kind, raises ``ExpressionSyntaxError``. Predicates never mutate
the value.

Sizes (``gte=2`` on a string, list or dict) compare the length; a
``timedelta`` compares against a duration parameter (``gte=1m30s``).
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from typing import Any

from exprval.domain.errors import ExpressionSyntaxError
from exprval.domain.kinds import SIZED_KINDS, Kind
from exprval.domain.params import (
    parse_bool,
    parse_duration,
    parse_float,
    parse_int,
    parse_tokens,
    parse_uint,
)
from exprval.validation.handle import ValueHandle

PredicateFn = Callable[[ValueHandle, str], bool]
FormatFn = Callable[[str], bool]

FORMAT_RULE = "format"


def not_applicable(handle: ValueHandle, rule_name: str, param: str) -> ExpressionSyntaxError:
    """Error for a rule used on a kind it does not support."""
    return ExpressionSyntaxError(
        near=f"{rule_name}={param}" if param else rule_name,
        comment=f"validator is not applicable to type {handle.type_description}",
    )


def _operands(handle: ValueHandle, rule_name: str, param: str) -> tuple[Any, Any]:
    """Return ``(actual, expected)`` for an ordered comparison."""
    kind = handle.kind
    if kind is Kind.INTEGER:
        if handle.is_duration:
            return handle.as_duration(), parse_duration(param)
        return handle.as_integer(), parse_int(param)
    if kind is Kind.UNSIGNED:
        return handle.as_unsigned(), parse_uint(param)
    if kind is Kind.FLOAT:
        return handle.as_float(), parse_float(param)
    if kind in SIZED_KINDS:
        return handle.length(), parse_int(param)
    raise not_applicable(handle, rule_name, param)


def comparison(
    rule_name: str,
    compare: Callable[[Any, Any], bool],
    *,
    booleans: bool = False,
) -> PredicateFn:
    """Build a predicate comparing the value (or its size) with the parameter."""

    def predicate(handle: ValueHandle, param: str) -> bool:
        if booleans and handle.kind is Kind.BOOLEAN:
            return compare(handle.as_boolean(), parse_bool(param))
        actual, expected = _operands(handle, rule_name, param)
        return compare(actual, expected)

    predicate.__name__ = f"check_{rule_name}"
    predicate.__doc__ = f"``{rule_name}=<n>`` on numbers, durations and sizes."
    predicate.__qualname__ = predicate.__name__
    return predicate


def check_empty(handle: ValueHandle, param: str) -> bool:
    """``empty=true|false`` on strings, sequences and mappings."""
    if handle.kind not in SIZED_KINDS:
        raise not_applicable(handle, "empty", param)
    return (handle.length() == 0) == parse_bool(param)


def check_nil(handle: ValueHandle, param: str) -> bool:
    """``nil=true|false`` on optional values."""
    if handle.kind is not Kind.OPTIONAL:
        raise not_applicable(handle, "nil", param)
    return handle.is_absent() == parse_bool(param)


def check_one_of(handle: ValueHandle, param: str) -> bool:
    """``one_of=a,b,c`` on numbers, durations and strings."""
    kind = handle.kind
    parse_token: Callable[[str], Any]
    if kind is Kind.INTEGER and handle.is_duration:
        actual: Any = handle.as_duration()
        parse_token = parse_duration
    elif kind is Kind.INTEGER:
        actual, parse_token = handle.as_integer(), parse_int
    elif kind is Kind.UNSIGNED:
        actual, parse_token = handle.as_unsigned(), parse_uint
    elif kind is Kind.FLOAT:
        actual, parse_token = handle.as_float(), parse_float
    elif kind is Kind.STRING:
        actual, parse_token = handle.as_string(), str
    else:
        raise not_applicable(handle, "one_of", param)

    tokens = parse_tokens(param)
    if not tokens:
        raise ExpressionSyntaxError(near=param, comment="expected at least one token")
    return actual in [parse_token(token) for token in tokens]


def format_predicate(formats: Mapping[str, FormatFn]) -> PredicateFn:
    """Build the ``format=<name>`` predicate over a format table."""

    def check_format(handle: ValueHandle, param: str) -> bool:
        """``format=<name>`` on strings, using a registered format check."""
        if handle.kind is not Kind.STRING:
            raise not_applicable(handle, FORMAT_RULE, param)
        check = formats.get(param)
        if check is None:
            raise ExpressionSyntaxError(near=param, comment="unknown format")
        return check(handle.as_string())

    return check_format


BUILTIN_PREDICATES: dict[str, PredicateFn] = {
    "eq": comparison("eq", operator.eq, booleans=True),
    "ne": comparison("ne", operator.ne, booleans=True),
    "gt": comparison("gt", operator.gt),
    "lt": comparison("lt", operator.lt),
    "gte": comparison("gte", operator.ge),
    "lte": comparison("lte", operator.le),
    "empty": check_empty,
    "nil": check_nil,
    "one_of": check_one_of,
}

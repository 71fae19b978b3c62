"""Rule parameter grammar: integers, floats, booleans, durations, token lists.

Every parser raises :class:`ExpressionSyntaxError` with the offending
parameter as the ``near`` snippet; the evaluator fills in the enclosing
expression and field name.
"""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal

from exprval.domain.errors import ExpressionSyntaxError

TOKEN_SEPARATOR = ","

_INTEGER = re.compile(r"[+-]?\d+")
_UNSIGNED = re.compile(r"\+?\d+")

_TRUE = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE = frozenset({"0", "f", "F", "false", "FALSE", "False"})

# Go-style duration literals: "300ms", "-1.5h", "2h45m", "0".
_DURATION = re.compile(r"[+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_NANOSECONDS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}


def _syntax(param: str, comment: str) -> ExpressionSyntaxError:
    return ExpressionSyntaxError(near=param, comment=comment)


def parse_int(param: str) -> int:
    """Parse a base-10 signed integer."""
    if not _INTEGER.fullmatch(param):
        raise _syntax(param, "could not parse integer")
    return int(param)


def parse_uint(param: str) -> int:
    """Parse a base-10 unsigned integer."""
    if not _UNSIGNED.fullmatch(param):
        raise _syntax(param, "could not parse unsigned integer")
    return int(param)


def parse_float(param: str) -> float:
    """Parse a decimal or scientific float (``inf`` and ``nan`` included)."""
    try:
        return float(param)
    except ValueError as exc:
        raise _syntax(param, "could not parse float") from exc


def parse_bool(param: str) -> bool:
    """Parse ``true``/``false`` in the usual spellings (``1``, ``t``, ``TRUE``...)."""
    if param in _TRUE:
        return True
    if param in _FALSE:
        return False
    raise _syntax(param, "could not parse boolean")


def parse_duration(param: str) -> timedelta:
    """Parse a Go-style duration literal into a :class:`timedelta`.

    Sub-microsecond precision is rounded to the nearest microsecond, the
    resolution of :class:`timedelta`.

    Examples:
        >>> parse_duration("1h30m")
        datetime.timedelta(seconds=5400)
        >>> parse_duration("-500ms")
        datetime.timedelta(days=-1, seconds=86399, microseconds=500000)
    """
    if param in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION.fullmatch(param):
        raise _syntax(param, "could not parse duration")

    total = Decimal(0)
    for number, unit in _DURATION_PART.findall(param):
        total += Decimal(number) * _NANOSECONDS[unit]
    if param.startswith("-"):
        total = -total
    return timedelta(microseconds=float(total / 1000))


def parse_tokens(param: str) -> list[str]:
    """Split a comma separated token list, trimming and dropping blanks.

    Examples:
        >>> parse_tokens("a, b ,, c")
        ['a', 'b', 'c']
    """
    return [token.strip() for token in param.split(TOKEN_SEPARATOR) if token.strip()]

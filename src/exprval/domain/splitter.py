"""Separates key, value and remainder expressions.

An expression such as ``gte=2 [empty=false] > gte=0 & lte=10`` is split
at the first top-level dive operator (``>``)::

    key       = "empty=false"        (applied to mapping keys)
    value     = "gte=2 "             (applied to the current value)
    remainder = " gte=0 & lte=10"    (applied to members / the pointee)

Brackets nest, so a key expression may itself contain dive operators:
``[nil=false > empty=false]``. When several top-level groups precede the
dive operator the last one is the key expression; the earlier ones stay in
the value expression, where the rule parser rejects them.
"""

from __future__ import annotations

from dataclasses import dataclass

from exprval.domain.errors import ExpressionSyntaxError

DIVE_OPERATOR = ">"
KEY_OPEN = "["
KEY_CLOSE = "]"


@dataclass(frozen=True)
class SplitResult:
    """The three sub-expressions of one raw expression."""

    key: str = ""
    value: str = ""
    remainder: str = ""


def split(expression: str, *, strict: bool = True) -> SplitResult:
    """Split *expression* into key, value and remainder expressions.

    Raises:
        ExpressionSyntaxError: brackets are unbalanced, or (strict only) the
            dive operator is not followed by an expression.
    """
    depth = 0
    start = -1
    end = -1
    stop = len(expression)
    dived = False

    for i, char in enumerate(expression):
        if char == KEY_OPEN:
            if depth == 0:
                start = i
            depth += 1
        elif char == KEY_CLOSE:
            depth -= 1
            if depth < 0:
                raise ExpressionSyntaxError(
                    expression=expression,
                    near=expression[i:],
                    comment="unexpected closing bracket",
                )
            if depth == 0:
                end = i
        elif char == DIVE_OPERATOR and depth == 0:
            stop = i
            dived = True
            break

    if depth > 0:
        raise ExpressionSyntaxError(
            expression=expression,
            near=expression[start:],
            comment="expected closing bracket",
        )

    if start >= 0:
        head = expression[:start]
        tail = expression[end + 1 : stop]
        value = f"{head} {tail}" if head and tail else head or tail
        key = expression[start + 1 : end]
    else:
        value = expression[:stop]
        key = ""

    remainder = expression[stop + 1 :] if dived else ""
    if dived and strict and not remainder.strip():
        raise ExpressionSyntaxError(
            expression=expression,
            near=expression[stop:],
            comment="expected expression after dive operator",
        )

    return SplitResult(key=key, value=value, remainder=remainder)

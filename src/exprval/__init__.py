"""exprval: declarative constraint validation for nested Python values.

Attach small expressions to record fields and validate the whole tree::

    from dataclasses import dataclass
    from typing import Annotated

    from exprval import Expr, validate

    @dataclass
    class Person:
        age: Annotated[int, Expr("gte=0 & lte=150")]
        tags: Annotated[list[str], Expr("empty=false > format=alpha")]

    validate(Person(age=30, tags=["a"]))
"""

from exprval.domain.errors import ExpressionSyntaxError, ExprvalError, ValidationError
from exprval.domain.kinds import Kind
from exprval.domain.rules import Rule, RuleSet, parse
from exprval.domain.splitter import SplitResult, split
from exprval.validation import (
    Expr,
    RecordView,
    Registry,
    SelfValidating,
    UInt,
    Validator,
    ValueHandle,
    validate,
    validate_value,
)

__version__ = "0.1.0"

__all__ = [
    "Expr",
    "ExpressionSyntaxError",
    "ExprvalError",
    "Kind",
    "RecordView",
    "Registry",
    "Rule",
    "RuleSet",
    "SelfValidating",
    "SplitResult",
    "UInt",
    "ValidationError",
    "Validator",
    "ValueHandle",
    "__version__",
    "parse",
    "split",
    "validate",
    "validate_value",
]

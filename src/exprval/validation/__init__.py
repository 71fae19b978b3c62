"""Validation layer: value handles, predicates, formats and the evaluator.

Depends on the domain layer, pydantic (model introspection) and
``exprval.config.models`` (engine settings). It must never import from
services, infrastructure, commands, or output.
"""

from exprval.validation.annotations import Expr, RecordView
from exprval.validation.evaluator import Validator, validate, validate_value
from exprval.validation.handle import UInt, ValueHandle
from exprval.validation.hooks import SelfValidating
from exprval.validation.registry import Registry

__all__ = [
    "Expr",
    "RecordView",
    "Registry",
    "SelfValidating",
    "UInt",
    "Validator",
    "ValueHandle",
    "validate",
    "validate_value",
]

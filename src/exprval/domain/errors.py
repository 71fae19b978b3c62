"""Error taxonomy: syntax errors vs. validation errors.

Both kinds carry a field name that starts empty and is filled in by the
nearest enclosing record frame as the error propagates outward.

INVARIANT: a field name, once set, is never overwritten.
"""

from __future__ import annotations


class ExprvalError(Exception):
    """Base class for every error raised by the evaluator."""

    def __init__(self, field_name: str = "") -> None:
        super().__init__()
        self._field_name = field_name

    @property
    def field_name(self) -> str:
        """Name of the record field where the failure occurred (may be empty)."""
        return self._field_name

    def annotate(self, field_name: str) -> None:
        """Set the field name unless an inner frame already did."""
        if not self._field_name:
            self._field_name = field_name

    def __str__(self) -> str:
        return self.message

    @property
    def message(self) -> str:  # pragma: no cover - overridden
        raise NotImplementedError


class ValidationError(ExprvalError):
    """A well-formed rule rejected the value."""

    def __init__(
        self,
        *,
        type_description: str,
        rule_name: str,
        param: str = "",
        field_name: str = "",
    ) -> None:
        super().__init__(field_name)
        self.type_description = type_description
        self.rule_name = rule_name
        self.param = param

    @property
    def rule(self) -> str:
        """The failing rule rendered as ``name=param``."""
        return f"{self.rule_name}={self.param}" if self.param else self.rule_name

    @property
    def message(self) -> str:
        if self.field_name:
            return (
                f'Validation error in field "{self.field_name}" of type '
                f'"{self.type_description}" using validator "{self.rule}"'
            )
        return (
            f'Validation error in value of type "{self.type_description}" '
            f'using validator "{self.rule}"'
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": "validation",
            "field": self.field_name,
            "type": self.type_description,
            "rule": self.rule_name,
            "param": self.param,
        }


class ExpressionSyntaxError(ExprvalError):
    """An expression, a rule parameter, or a rule name is malformed.

    Also raised when the dive operators of an expression do not match the
    shape of the value they are applied to.
    """

    def __init__(
        self,
        *,
        expression: str = "",
        near: str = "",
        comment: str,
        field_name: str = "",
    ) -> None:
        super().__init__(field_name)
        self.expression = expression
        self.near = near
        self.comment = comment

    def with_expression(self, expression: str) -> ExpressionSyntaxError:
        """Record the enclosing expression if none was captured yet."""
        if not self.expression:
            self.expression = expression
        return self

    @property
    def message(self) -> str:
        if self.field_name:
            return (
                f'Syntax error when validating field "{self.field_name}", '
                f'expression "{self.expression}" near "{self.near}": {self.comment}'
            )
        return (
            f'Syntax error when validating value, expression "{self.expression}" '
            f'near "{self.near}": {self.comment}'
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": "syntax",
            "field": self.field_name,
            "expression": self.expression,
            "near": self.near,
            "comment": self.comment,
        }

"""Tests for the error model."""

from __future__ import annotations

from exprval.domain.errors import ExpressionSyntaxError, ExprvalError, ValidationError


class TestValidationError:
    def test_message_with_field(self) -> None:
        err = ValidationError(type_description="int", rule_name="gte", param="0", field_name="age")
        assert str(err) == 'Validation error in field "age" of type "int" using validator "gte=0"'

    def test_message_without_field(self) -> None:
        err = ValidationError(type_description="str", rule_name="nil")
        assert str(err) == 'Validation error in value of type "str" using validator "nil"'

    def test_to_dict(self) -> None:
        err = ValidationError(type_description="int", rule_name="lte", param="150")
        assert err.to_dict() == {
            "kind": "validation",
            "field": "",
            "type": "int",
            "rule": "lte",
            "param": "150",
        }


class TestExpressionSyntaxError:
    def test_message_with_field(self) -> None:
        err = ExpressionSyntaxError(
            expression="[gte=0", near="[gte=0", comment="expected closing bracket", field_name="n"
        )
        assert str(err) == (
            'Syntax error when validating field "n", expression "[gte=0" '
            'near "[gte=0": expected closing bracket'
        )

    def test_message_without_field(self) -> None:
        err = ExpressionSyntaxError(expression="x", near="x", comment="boom")
        assert str(err).startswith('Syntax error when validating value, expression "x"')

    def test_with_expression_keeps_first(self) -> None:
        err = ExpressionSyntaxError(near="1.5", comment="could not parse integer")
        err.with_expression("gte=1.5").with_expression("outer > gte=1.5")
        assert err.expression == "gte=1.5"


class TestAnnotate:
    def test_first_name_wins(self) -> None:
        err = ValidationError(type_description="int", rule_name="gte", param="0")
        err.annotate("inner")
        err.annotate("outer")
        assert err.field_name == "inner"

    def test_is_base_class(self) -> None:
        assert issubclass(ValidationError, ExprvalError)
        assert issubclass(ExpressionSyntaxError, ExprvalError)

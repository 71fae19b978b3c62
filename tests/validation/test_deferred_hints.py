"""Expressions on dataclasses whose hints cannot all be resolved at runtime."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

import pytest

from exprval import Expr, ValidationError, validate
from exprval.domain.kinds import Kind
from exprval.validation.handle import ValueHandle

if TYPE_CHECKING:
    from decimal import Decimal


@dataclass
class Priced:
    price: Decimal | None
    age: Annotated[int, Expr("gte=0")]


@dataclass
class PricedAnnotated:
    price: Annotated[Decimal | None, Expr("nil=false")]
    name: Annotated[str, Expr("empty=false")] = "x"


class TestUnresolvableHints:
    def test_other_fields_keep_their_expressions(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate(Priced(price=None, age=-1))
        assert exc_info.value.field_name == "age"
        assert exc_info.value.rule_name == "gte"

    def test_passing_record(self) -> None:
        validate(Priced(price=None, age=3))

    def test_unresolved_field_still_typed_optional(self) -> None:
        fields = {name: handle for name, _, handle in ValueHandle(Priced(None, 1)).fields()}
        assert fields["price"].kind is Kind.OPTIONAL
        assert fields["age"].kind is Kind.INTEGER

    def test_expression_on_unresolved_field_kept(self) -> None:
        handle = ValueHandle(PricedAnnotated(None))
        expressions = {name: expr for name, expr, _ in handle.fields()}
        assert expressions == {"price": "nil=false", "name": "empty=false"}
        with pytest.raises(ValidationError) as exc_info:
            validate(PricedAnnotated(price=None))
        assert exc_info.value.field_name == "price"
        assert exc_info.value.rule_name == "nil"

    def test_function_local_class(self) -> None:
        @dataclass
        class Inner:
            size: Annotated[int, Expr("lte=3")]

        @dataclass
        class Outer:
            inner: Inner
            count: Annotated[int, Expr("lte=3")]

        with pytest.raises(ValidationError) as exc_info:
            validate(Outer(inner=Inner(1), count=9))
        assert exc_info.value.field_name == "count"

        with pytest.raises(ValidationError) as exc_info:
            validate(Outer(inner=Inner(9), count=1))
        assert exc_info.value.field_name == "size"

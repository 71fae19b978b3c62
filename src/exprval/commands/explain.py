"""Command: show how an expression is split and parsed."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from exprval.commands._base import ExprvalCommand

if TYPE_CHECKING:
    from exprval.commands._context import AppContext


@click.command(
    cls=ExprvalCommand,
    examples="""\
  exprval explain "gte=0 & lte=150"
  exprval explain "gte=2 [empty=false] > gte=0 & lte=10"
  exprval --json explain "nil=false > one_of=a,b,c\"""",
)
@click.argument("expression")
@click.pass_obj
def explain(app: AppContext, expression: str) -> None:
    """Break EXPRESSION into its dive levels and rule groups."""
    app.emit(app.service.explain(expression))

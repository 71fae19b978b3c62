"""Command: list the rule names the validator understands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from exprval.commands._base import ExprvalCommand

if TYPE_CHECKING:
    from exprval.commands._context import AppContext


@click.command(
    cls=ExprvalCommand,
    examples="""\
  exprval predicates
  exprval --json predicates""",
)
@click.pass_obj
def predicates(app: AppContext) -> None:
    """List available rules (built-in and from plugins)."""
    app.emit(app.service.list_predicates())

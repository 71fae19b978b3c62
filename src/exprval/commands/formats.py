"""Command: list the names accepted by the format rule."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from exprval.commands._base import ExprvalCommand

if TYPE_CHECKING:
    from exprval.commands._context import AppContext


@click.command(
    cls=ExprvalCommand,
    examples="""\
  exprval formats
  exprval -q formats | grep uuid""",
)
@click.pass_obj
def formats(app: AppContext) -> None:
    """List available formats (built-in and from plugins)."""
    app.emit(app.service.list_formats())

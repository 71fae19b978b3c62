"""Subcommand modules for exprval.

register_commands() imports command modules on demand so that
``exprval --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from exprval.commands.check import check
    from exprval.commands.explain import explain
    from exprval.commands.formats import formats
    from exprval.commands.predicates import predicates

    cli.add_command(check)
    cli.add_command(explain)
    cli.add_command(formats)
    cli.add_command(predicates)

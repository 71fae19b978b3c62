"""Command: validate a JSON/TOML/YAML document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from exprval.commands._base import ExprvalCommand

if TYPE_CHECKING:
    from exprval.commands._context import AppContext


@click.command(
    cls=ExprvalCommand,
    examples="""\
  exprval check config.yaml --rules rules.toml
  exprval check ports.json --expr "empty=false > gte=1 & lte=65535"
  exprval check users.json --expr "[format=email] > nil=false"
  exprval --lenient check legacy.toml --rules rules.toml
  exprval --json check config.yaml --rules rules.toml""",
)
@click.argument("document", type=click.Path(path_type=Path))
@click.option(
    "--rules",
    "rules_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Rules table (TOML/YAML/JSON) mapping fields to expressions.",
)
@click.option(
    "--expr",
    "expression",
    default=None,
    help="Expression applied to the whole document.",
)
@click.pass_obj
def check(
    app: AppContext,
    document: Path,
    rules_path: Path | None,
    expression: str | None,
) -> None:
    """Validate DOCUMENT against a rules table and/or an expression."""
    if rules_path is None and expression is None:
        raise click.UsageError("Give --rules, --expr, or both.")
    app.emit(app.service.check_document(document, rules_path=rules_path, expression=expression))

"""Root CLI group for exprval with global flags and command registration."""

from __future__ import annotations

import click

from exprval import __version__
from exprval.commands import register_commands
from exprval.commands._base import ExprvalGroup
from exprval.commands._context import AppContext
from exprval.config.settings import ExprvalSettings


@click.group(
    cls=ExprvalGroup,
    invoke_without_command=True,
    examples="""\
  exprval check config.yaml --rules rules.toml
  exprval explain "gte=1 & lte=2 | eq=4 > empty=false"
  exprval -c ci/exprval.toml --lenient check data.json --expr "empty=false\"""",
)
@click.version_option(version=__version__, prog_name="exprval")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--lenient", is_flag=True, help="Lenient dialect: skip unknown or inapplicable rules."
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    lenient: bool,
) -> None:
    """exprval: declarative constraint validation for documents."""
    settings = ExprvalSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        lenient=lenient,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

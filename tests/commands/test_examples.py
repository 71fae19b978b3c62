"""Tests for the ``--examples`` flag on every command."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from exprval.cli import cli

COMMANDS = ["check", "explain", "formats", "predicates"]


@pytest.mark.parametrize("command", COMMANDS)
def test_examples_flag(cli_runner: CliRunner, project: Path, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--examples"])
    assert result.exit_code == 0
    assert f"exprval {command}" in result.output


@pytest.mark.parametrize("command", COMMANDS)
def test_examples_in_help(cli_runner: CliRunner, project: Path, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--help"])
    assert "--examples" in result.output

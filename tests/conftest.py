"""Shared pytest fixtures for exprval tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from exprval.services.telemetry import _current_span, disable_telemetry
from exprval.validation.evaluator import Validator
from exprval.validation.registry import Registry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def validator() -> Validator:
    """Strict validator over the built-in registry."""
    return Validator(Registry.default())


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory used as CWD, isolated from env config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EXPRVAL_CONFIG", raising=False)
    (tmp_path / "exprval.toml").write_text("", encoding="utf-8")
    return tmp_path


@pytest.fixture
def server_document(tmp_path: Path) -> Path:
    """A small JSON document with a nested owner record and a port list."""
    path = tmp_path / "server.json"
    path.write_text(
        json.dumps(
            {
                "name": "edge-01",
                "ports": [80, 443],
                "owner": {"email": "ops@example.com", "team": "infra"},
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def server_rules(tmp_path: Path) -> Path:
    """Rules table matching ``server_document``."""
    path = tmp_path / "rules.toml"
    path.write_text(
        'name = "empty=false & format=hostname"\n'
        'ports = "empty=false > gte=1 & lte=65535"\n'
        "\n"
        "[owner]\n"
        'email = "format=email"\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Commands enable telemetry under -v; keep it from leaking between tests."""
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture(autouse=True)
def _drop_structlog_handlers() -> Generator[None]:
    """AppContext installs a stderr handler on the root logger; drop it after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)

"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from exprval.config.logging import LOGGER_NAME, configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    root = logging.getLogger()
    original_level = root.level
    package_logger = logging.getLogger(LOGGER_NAME)
    package_level = package_logger.level
    yield
    root.setLevel(original_level)
    package_logger.setLevel(package_level)
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_by_default(self) -> None:
        configure_logging()
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_quiet_hides_warnings(self) -> None:
        configure_logging(quiet=True)
        assert logging.getLogger(LOGGER_NAME).level == logging.ERROR

    def test_verbose_wins_over_quiet(self) -> None:
        configure_logging(verbose=True, quiet=True)
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG

    def test_single_handler(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_json_structlog_event(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("exprval.test").warning("rule checked", rule="gte=0")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "rule checked"
        assert parsed["rule"] == "gte=0"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "exprval.test"
        assert "timestamp" in parsed

    def test_json_stdlib_event(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("exprval.validation.evaluator").debug("Checking %s", "port")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Checking port"
        assert parsed["level"] == "debug"

    def test_debug_suppressed_when_not_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("exprval.validation.evaluator").debug("hidden")
        assert capfd.readouterr().err == ""

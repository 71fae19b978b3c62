"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Builds the validator lazily (plugins are only
discovered when a command needs them) and centralizes result emission.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from exprval.config.logging import configure_logging
from exprval.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from exprval.config.settings import ExprvalSettings
    from exprval.services.result import ServiceResult
    from exprval.services.validation import ValidationService
    from exprval.validation.evaluator import Validator


class AppContext:
    """State flowing through Click's command hierarchy."""

    def __init__(self, settings: ExprvalSettings) -> None:
        self.settings = settings
        self._validator: Validator | None = None

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from exprval.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def validator(self) -> Validator:
        """Validator over the built-in registry plus any plugin contributions."""
        if self._validator is None:
            from exprval.validation.evaluator import Validator
            from exprval.validation.registry import Registry

            registry = Registry.default()
            if self.settings.plugins.enabled:
                from exprval.plugins.manager import PluginManager

                manager = PluginManager()
                manager.discover_and_load(
                    local_dir=self.settings.project_root / self.settings.plugins.local_dir
                )
                registry = manager.build_registry(registry)
            self._validator = Validator(registry, self.settings.effective_engine)
        return self._validator

    @property
    def service(self) -> ValidationService:
        from exprval.services.validation import ValidationService

        return ValidationService(self.validator)

    def emit(self, result: ServiceResult) -> None:
        """Print a ServiceResult with the right stream and exit status.

        * Success: stdout, returns normally. Outside JSON mode warnings go
          to stderr so piped output stays clean.
        * Failure: stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are part of the payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

"""ValidationService: validate documents and records, explain expressions.

Every operation returns a :class:`ServiceResult`; evaluator and loader
exceptions are translated into error codes here:

* ``VALIDATION_FAILED`` - a rule rejected a value
* ``SYNTAX_ERROR``      - an expression, parameter or rule name is malformed
* ``SELF_CHECK_FAILED`` - a ``validate_self()`` hook returned or raised an error
* ``LOAD_FAILED``       - a document or rules file could not be read
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from exprval.domain.errors import ExpressionSyntaxError, ValidationError
from exprval.domain.rules import RuleSet, parse
from exprval.domain.splitter import split
from exprval.infrastructure.documents import (
    DocumentError,
    build_record,
    load_document,
    load_rules,
)
from exprval.services.result import (
    LOAD_FAILED,
    SELF_CHECK_FAILED,
    SYNTAX_ERROR,
    VALIDATION_FAILED,
    ServiceResult,
)
from exprval.services.telemetry import trace_span, traced
from exprval.validation.evaluator import Validator

logger = logging.getLogger(__name__)


class ValidationService:
    """Runs a :class:`Validator` on behalf of the CLI."""

    def __init__(self, validator: Validator | None = None) -> None:
        self._validator = validator or Validator()

    @property
    def validator(self) -> Validator:
        return self._validator

    # ------------------------------------------------------------------
    # Checking
    # ------------------------------------------------------------------

    @traced
    def check_document(
        self,
        path: Path,
        rules_path: Path | None = None,
        expression: str | None = None,
    ) -> ServiceResult:
        """Validate a JSON/TOML/YAML document.

        The rules table (if any) is applied first, treating the document as
        a record; then *expression* (if any) is applied to the document as
        a whole.
        """
        op = "check_document"
        data: dict[str, Any] = {
            "path": str(path),
            "rules": str(rules_path) if rules_path else None,
            "expression": expression,
        }

        with trace_span("load") as span:
            try:
                document = load_document(path)
                rules = load_rules(rules_path) if rules_path else {}
            except DocumentError as exc:
                return ServiceResult.failure(
                    op, LOAD_FAILED, str(exc), detail={"path": exc.path}, data=data
                )
            if span is not None:
                span.annotate("format", path.suffix.lstrip(".").lower())
                span.annotate("fields", len(rules))

        if rules and not isinstance(document, Mapping):
            return ServiceResult.failure(
                op,
                LOAD_FAILED,
                f"{path}: a rules file needs a table at the document root, "
                f"got {type(document).__name__}",
                detail={"path": str(path)},
                data=data,
            )

        warnings: list[str] = []
        if not rules and expression is None:
            warnings.append("No rules file or expression given; nothing was checked")

        with trace_span("evaluate"):
            try:
                if rules:
                    self._validator.validate(build_record(document, rules, name=path.name))
                if expression is not None:
                    self._validator.validate_value(document, expression)
            except Exception as exc:  # noqa: BLE001 - self-check hooks may raise anything
                return self._failure(op, exc, data)

        logger.debug("Document %s passed", path)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def check_record(self, root: Any) -> ServiceResult:
        """Validate an in-memory record (dataclass, pydantic model, RecordView)."""
        op = "check_record"
        data = {"record": type(root).__name__}
        error = self._validator.check(root)
        if error is not None:
            return self._failure(op, error, data)
        return ServiceResult(ok=True, op=op, data=data)

    @staticmethod
    def _failure(op: str, exc: BaseException, data: dict[str, Any]) -> ServiceResult:
        if isinstance(exc, ValidationError):
            code = VALIDATION_FAILED
        elif isinstance(exc, ExpressionSyntaxError):
            code = SYNTAX_ERROR
        else:
            code = SELF_CHECK_FAILED
        detail = (
            exc.to_dict()
            if isinstance(exc, (ValidationError, ExpressionSyntaxError))
            else {"kind": "self_check", "type": type(exc).__name__}
        )
        return ServiceResult.failure(op, code, str(exc), detail=detail, data=data)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @traced
    def explain(self, expression: str) -> ServiceResult:
        """Break an expression into its dive levels and rule groups."""
        op = "explain"
        warnings: list[str] = []
        try:
            levels = self._explain_levels(expression, warnings)
        except ExpressionSyntaxError as exc:
            return ServiceResult.failure(
                op, SYNTAX_ERROR, str(exc), detail=exc.to_dict(), data={"expression": expression}
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"expression": expression, "levels": levels},
            warnings=warnings,
        )

    def _explain_levels(self, expression: str, warnings: list[str]) -> list[dict[str, Any]]:
        levels: list[dict[str, Any]] = []
        current = expression
        depth = 0
        while True:
            try:
                parts = split(current, strict=self._validator.strict)
                rules = parse(parts.value)
            except ExpressionSyntaxError as exc:
                raise exc.with_expression(current)
            self._check_names(current, rules, warnings)
            level: dict[str, Any] = {
                "depth": depth,
                "value": parts.value.strip(),
                "groups": [[str(rule) for rule in group] for group in rules],
            }
            if parts.key.strip():
                level["key"] = self._explain_levels(parts.key, warnings)
            levels.append(level)
            if not parts.remainder.strip():
                return levels
            current = parts.remainder
            depth += 1

    def _check_names(self, expression: str, rules: RuleSet, warnings: list[str]) -> None:
        for rule in rules.rules():
            if self._validator.registry.predicate(rule.name) is not None:
                continue
            if self._validator.strict:
                raise ExpressionSyntaxError(
                    expression=expression,
                    near=str(rule),
                    comment="unknown validator",
                )
            warnings.append(f"Unknown validator '{rule.name}' will be skipped")

    @traced
    def list_formats(self) -> ServiceResult:
        formats = sorted(self._validator.registry.formats)
        return ServiceResult(
            ok=True,
            op="list_formats",
            data={"formats": formats, "count": len(formats)},
        )

    @traced
    def list_predicates(self) -> ServiceResult:
        predicates = [
            {"name": name, "description": _summary(fn)}
            for name, fn in sorted(self._validator.registry.predicates.items())
        ]
        return ServiceResult(
            ok=True,
            op="list_predicates",
            data={"predicates": predicates, "count": len(predicates)},
        )


def _summary(fn: Any) -> str:
    doc = getattr(fn, "__doc__", None) or ""
    return doc.strip().splitlines()[0] if doc.strip() else ""

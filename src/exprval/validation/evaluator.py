"""Structural evaluator: applies expressions across nested values.

Each visit takes ``(handle, field_name, expression)`` and:

1. splits the expression into key / value / remainder parts;
2. runs the value's self-check, if it has one;
3. parses and evaluates the value expression (OR of AND-groups,
   short-circuiting);
4. dives: record fields with their own expressions, mapping keys with the
   key expression, mapping values, sequence members and optional
   pointees with the remainder.

Evaluation is depth-first, left to right, and stops at the first error.
Errors are raised; a clean run returns None.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Final

from exprval.config.discovery import load_config
from exprval.config.models import EngineConfig
from exprval.domain.errors import ExpressionSyntaxError, ExprvalError, ValidationError
from exprval.domain.kinds import SCALAR_KINDS, Kind
from exprval.domain.rules import Rule, RuleSet, parse
from exprval.domain.splitter import split
from exprval.validation.handle import ValueHandle, is_record
from exprval.validation.hooks import run_self_check
from exprval.validation.predicates import PredicateFn
from exprval.validation.registry import Registry

logger = logging.getLogger(__name__)

_NO_REMAINDER_KINDS: frozenset[Kind] = SCALAR_KINDS | {Kind.RECORD}


class Validator:
    """Evaluates constraint expressions against values.

    A validator holds only immutable state (a :class:`Registry` and an
    :class:`EngineConfig`), so one instance can be shared freely.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.registry = registry if registry is not None else Registry.default()
        self.config = config if config is not None else EngineConfig()

    @classmethod
    def from_config(
        cls,
        path: Path | None = None,
        *,
        cwd: Path | None = None,
        registry: Registry | None = None,
    ) -> Validator:
        """Build a validator from the ``[engine]`` table of ``exprval.toml``.

        *path* defaults to the file found by walking up from *cwd*; without
        one the defaults apply. Plugins are not loaded here, pass a
        *registry* that includes them if needed.
        """
        return cls(registry, load_config(path, cwd).engine)

    @property
    def strict(self) -> bool:
        return self.config.strict

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def validate(self, root: Any) -> None:
        """Validate every field of a record, recursively.

        Raises:
            ExpressionSyntaxError: *root* is not a record, or an expression
                is malformed.
            ValidationError: a rule rejected a value.
            Exception: whatever a ``validate_self()`` hook returned or raised.
        """
        if not is_record(root):
            raise ExpressionSyntaxError(
                near=type(root).__name__,
                comment="not a record or record reference",
            )
        self.evaluate(self.handle(root), "", "")

    def validate_value(
        self,
        value: Any,
        expression: str,
        *,
        field_name: str = "",
        hint: Any = None,
    ) -> None:
        """Validate any value against a single expression."""
        self.evaluate(self.handle(value, hint), field_name, expression)

    def check(self, root: Any) -> Exception | None:
        """Non-raising :meth:`validate`: return the error instead."""
        try:
            self.validate(root)
        except Exception as exc:  # noqa: BLE001 - self-check hooks may raise anything
            return exc
        return None

    def handle(self, value: Any, hint: Any = None) -> ValueHandle:
        return ValueHandle(value, hint, metadata_key=self.config.metadata_key)

    # ------------------------------------------------------------------
    # Recursive visit
    # ------------------------------------------------------------------

    def evaluate(self, handle: ValueHandle, field_name: str, expression: str) -> None:
        """Visit one value with its raw expression."""
        try:
            parts = split(expression, strict=self.strict)
        except ExpressionSyntaxError as exc:
            exc.with_expression(expression).annotate(field_name)
            raise

        if handle.kind is not Kind.OPTIONAL:
            run_self_check(handle.value, handle.hint)

        try:
            rules = parse(parts.value)
        except ExpressionSyntaxError as exc:
            exc.with_expression(expression).annotate(field_name)
            raise

        if rules:
            logger.debug("Checking %s (%s) against %s", field_name or "value", handle.kind, rules)
            self._apply(handle, field_name, expression, rules)

        self._dive(handle, field_name, expression, parts.key, parts.remainder)

    def _apply(
        self,
        handle: ValueHandle,
        field_name: str,
        expression: str,
        rules: RuleSet,
    ) -> None:
        """Evaluate OR-groups in order; raise the last group's first failure."""
        resolved = [self._resolve(group, field_name, expression) for group in rules]
        failure: ValidationError | None = None
        for group in resolved:
            failure = self._apply_group(handle, field_name, expression, group)
            if failure is None:
                return
        if failure is not None:
            failure.annotate(field_name)
            raise failure

    def _resolve(
        self,
        group: tuple[Rule, ...],
        field_name: str,
        expression: str,
    ) -> list[tuple[Rule, PredicateFn]]:
        """Look up each rule's predicate; unknown names fail in strict mode."""
        resolved: list[tuple[Rule, PredicateFn]] = []
        for rule in group:
            predicate = self.registry.predicate(rule.name)
            if predicate is not None:
                resolved.append((rule, predicate))
            elif self.strict:
                raise ExpressionSyntaxError(
                    expression=expression,
                    near=str(rule),
                    comment="unknown validator",
                    field_name=field_name,
                )
            else:
                logger.debug("Skipping unknown validator %r", rule.name)
        return resolved

    def _apply_group(
        self,
        handle: ValueHandle,
        field_name: str,
        expression: str,
        group: list[tuple[Rule, PredicateFn]],
    ) -> ValidationError | None:
        for rule, predicate in group:
            try:
                passed = predicate(handle, rule.param)
            except ExpressionSyntaxError as exc:
                if self.strict:
                    exc.with_expression(expression).annotate(field_name)
                    raise
                logger.debug("Rule %s not applicable to %s: %s", rule, handle.kind, exc.comment)
                continue
            if not passed:
                logger.debug("Rule %s failed on %s", rule, field_name or "value")
                return ValidationError(
                    type_description=handle.type_description,
                    rule_name=rule.name,
                    param=rule.param,
                )
        return None

    def _dive(
        self,
        handle: ValueHandle,
        field_name: str,
        expression: str,
        key_expression: str,
        remainder: str,
    ) -> None:
        kind = handle.kind
        if self.strict:
            self._check_shape(kind, field_name, expression, key_expression, remainder)
        if remainder.strip() or key_expression.strip():
            logger.debug("Diving into %s %s with %r", kind, field_name or "value", remainder)

        if kind is Kind.RECORD:
            for child_name, child_expression, child in handle.fields():
                try:
                    self.evaluate(child, child_name, child_expression)
                except ExprvalError as exc:
                    exc.annotate(child_name)
                    raise
        elif kind is Kind.MAPPING:
            for key, value in handle.items():
                self.evaluate(key, field_name, key_expression)
                self.evaluate(value, field_name, remainder)
        elif kind is Kind.SEQUENCE:
            for element in handle.elements():
                self.evaluate(element, field_name, remainder)
        elif kind is Kind.OPTIONAL and not handle.is_absent():
            self.evaluate(handle.deref(), field_name, remainder)

    @staticmethod
    def _check_shape(
        kind: Kind,
        field_name: str,
        expression: str,
        key_expression: str,
        remainder: str,
    ) -> None:
        """Reject dive expressions the value's shape cannot consume."""
        if key_expression.strip() and kind is not Kind.MAPPING:
            raise ExpressionSyntaxError(
                expression=expression,
                near=key_expression,
                comment="unexpected expression",
                field_name=field_name,
            )
        if remainder.strip() and kind in _NO_REMAINDER_KINDS:
            raise ExpressionSyntaxError(
                expression=expression,
                near=remainder,
                comment="unexpected expression",
                field_name=field_name,
            )


_default_validator: Final = Validator()


def default_validator() -> Validator:
    """The shared validator: built-in registry, strict dialect."""
    return _default_validator


def validate(root: Any, *, validator: Validator | None = None) -> None:
    """Validate a record (dataclass, pydantic model or :class:`RecordView`).

    Raises the first error found; returns None when everything passes.
    """
    (validator or _default_validator).validate(root)


def validate_value(
    value: Any,
    expression: str,
    *,
    field_name: str = "",
    hint: Any = None,
    validator: Validator | None = None,
) -> None:
    """Validate an arbitrary value against one expression."""
    (validator or _default_validator).validate_value(
        value, expression, field_name=field_name, hint=hint
    )

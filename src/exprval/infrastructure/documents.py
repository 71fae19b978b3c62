"""Document and rules-table loading.

A *document* is any JSON, TOML or YAML file. A *rules table* is a file in
one of the same formats whose string leaves are field expressions and
whose nested tables describe nested records::

    # rules.toml
    name = "empty=false"
    port = "gte=1 & lte=65535"

    [owner]
    "@" = "nil=false"          # expression for the "owner" field itself
    email = "format=email"

A nested table applies to a mapping value, or to every mapping inside a
list value.
"""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from exprval.validation.annotations import RecordView

SELF_KEY = "@"

JSON_SUFFIXES = frozenset({".json"})
TOML_SUFFIXES = frozenset({".toml"})
YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class DocumentError(Exception):
    """A document or rules table could not be read or has the wrong shape."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason


def load_document(path: Path) -> Any:
    """Parse *path* according to its suffix.

    Raises:
        DocumentError: the file is missing, has an unsupported suffix, or
            does not parse.
    """
    suffix = path.suffix.lower()
    if suffix not in JSON_SUFFIXES | TOML_SUFFIXES | YAML_SUFFIXES:
        raise DocumentError(path, f"unsupported document type '{suffix or path.name}'")
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(path, exc.strerror or str(exc)) from exc

    try:
        if suffix in JSON_SUFFIXES:
            return json.loads(raw)
        if suffix in TOML_SUFFIXES:
            return tomllib.loads(raw)
        # Fresh YAML instance per call; the loader object is stateful.
        return YAML(typ="safe").load(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, YAMLError) as exc:
        raise DocumentError(path, f"parse error: {exc}") from exc


def load_rules(path: Path) -> dict[str, Any]:
    """Load a rules table and check that every leaf is an expression."""
    table = load_document(path)
    if table is None:
        return {}
    if not isinstance(table, Mapping):
        raise DocumentError(path, "rules must be a table of field expressions")
    _check_rules(path, table, prefix="")
    return dict(table)


def _check_rules(path: Path, table: Mapping[Any, Any], *, prefix: str) -> None:
    for key, rule in table.items():
        dotted = f"{prefix}{key}"
        if not isinstance(key, str):
            raise DocumentError(path, f"rule key {dotted!r} is not a string")
        if isinstance(rule, Mapping):
            _check_rules(path, rule, prefix=f"{dotted}.")
        elif not isinstance(rule, str):
            raise DocumentError(
                path,
                f"rule '{dotted}' must be an expression string or a table, "
                f"got {type(rule).__name__}",
            )
        elif key == SELF_KEY and not prefix:
            raise DocumentError(path, f"'{SELF_KEY}' is only allowed inside a nested table")


def build_record(
    data: Mapping[str, Any],
    rules: Mapping[str, Any],
    *,
    name: str = "document",
) -> RecordView:
    """Wrap *data* (and nested mappings named by *rules*) in record views."""
    values = dict(data)
    expressions: dict[str, str] = {}
    for key, rule in rules.items():
        if key == SELF_KEY:
            continue
        if isinstance(rule, str):
            expressions[key] = rule
            continue
        expressions[key] = rule.get(SELF_KEY, "")
        if key in values:
            values[key] = _wrap(values[key], rule, name=f"{name}.{key}")
    return RecordView(values, expressions, name=name)


def _wrap(value: Any, rules: Mapping[str, Any], *, name: str) -> Any:
    if isinstance(value, Mapping):
        return build_record(value, rules, name=name)
    if isinstance(value, list):
        return [_wrap(item, rules, name=f"{name}[{i}]") for i, item in enumerate(value)]
    return value

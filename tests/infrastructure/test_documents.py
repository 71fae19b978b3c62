"""Tests for document and rules-table loading."""

from pathlib import Path

import pytest

from exprval import RecordView, ValidationError, validate
from exprval.infrastructure.documents import (
    DocumentError,
    build_record,
    load_document,
    load_rules,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadDocument:
    def test_json(self, tmp_path: Path) -> None:
        assert load_document(_write(tmp_path / "a.json", '{"a": [1, 2]}')) == {"a": [1, 2]}

    def test_toml(self, tmp_path: Path) -> None:
        doc = load_document(_write(tmp_path / "a.toml", "a = 1\n[b]\nc = true\n"))
        assert doc == {"a": 1, "b": {"c": True}}

    @pytest.mark.parametrize("suffix", [".yaml", ".yml", ".YAML"])
    def test_yaml(self, tmp_path: Path, suffix: str) -> None:
        doc = load_document(_write(tmp_path / f"a{suffix}", "a: 1\nb:\n  - x\n  - y\n"))
        assert doc == {"a": 1, "b": ["x", "y"]}

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentError, match="unsupported document type '.ini'"):
            load_document(_write(tmp_path / "a.ini", "[a]\n"))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentError) as exc_info:
            load_document(tmp_path / "absent.json")
        assert exc_info.value.path == str(tmp_path / "absent.json")

    @pytest.mark.parametrize(
        ("name", "text"),
        [("a.json", "{"), ("a.toml", "a = \n"), ("a.yaml", "a: [1\n")],
    )
    def test_parse_error(self, tmp_path: Path, name: str, text: str) -> None:
        with pytest.raises(DocumentError, match="parse error"):
            load_document(_write(tmp_path / name, text))


class TestLoadRules:
    def test_flat_and_nested(self, tmp_path: Path) -> None:
        rules = load_rules(
            _write(tmp_path / "r.toml", 'a = "gte=0"\n[b]\n"@" = "empty=false"\nc = "nil=false"\n')
        )
        assert rules == {"a": "gte=0", "b": {"@": "empty=false", "c": "nil=false"}}

    def test_empty_yaml(self, tmp_path: Path) -> None:
        assert load_rules(_write(tmp_path / "r.yaml", "")) == {}

    def test_not_a_table(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentError, match="rules must be a table"):
            load_rules(_write(tmp_path / "r.json", '["gte=0"]'))

    def test_non_string_leaf(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentError, match="rule 'b.c' must be an expression string"):
            load_rules(_write(tmp_path / "r.json", '{"b": {"c": 5}}'))

    def test_self_key_at_top_level(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentError, match="only allowed inside a nested table"):
            load_rules(_write(tmp_path / "r.json", '{"@": "gte=0"}'))


class TestBuildRecord:
    def test_flat(self) -> None:
        record = build_record({"a": 1}, {"a": "gte=0"}, name="doc")
        assert isinstance(record, RecordView)
        assert record.name == "doc"
        assert list(record.fields()) == [("a", "gte=0", 1)]

    def test_nested_table_wraps_mapping(self) -> None:
        record = build_record({"owner": {"email": "x"}}, {"owner": {"email": "format=email"}})
        with pytest.raises(ValidationError) as exc_info:
            validate(record)
        assert exc_info.value.field_name == "email"

    def test_nested_table_wraps_list_items(self) -> None:
        data = {"users": [{"age": 3}, {"age": -1}]}
        rules = {"users": {"@": "empty=false", "age": "gte=0"}}
        with pytest.raises(ValidationError) as exc_info:
            validate(build_record(data, rules))
        assert exc_info.value.field_name == "age"

    def test_self_expression(self) -> None:
        data = {"users": []}
        rules = {"users": {"@": "empty=false", "age": "gte=0"}}
        with pytest.raises(ValidationError) as exc_info:
            validate(build_record(data, rules))
        assert exc_info.value.field_name == "users"
        assert exc_info.value.rule_name == "empty"

    def test_missing_field(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate(build_record({}, {"name": "nil=false"}))
        assert exc_info.value.field_name == "name"

    def test_original_data_untouched(self) -> None:
        data = {"owner": {"email": "a@example.com"}}
        build_record(data, {"owner": {"email": "format=email"}})
        assert data == {"owner": {"email": "a@example.com"}}

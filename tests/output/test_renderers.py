"""Tests for the Rich renderers."""

from exprval.output.renderers import render_quiet, render_result
from exprval.services.result import SYNTAX_ERROR, VALIDATION_FAILED, ServiceResult


class TestRenderQuiet:
    def test_formats_one_per_line(self) -> None:
        result = ServiceResult(ok=True, op="list_formats", data={"formats": ["alpha", "email"]})
        assert render_quiet(result) == "alpha\nemail"

    def test_predicates_names(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_predicates",
            data={"predicates": [{"name": "eq", "description": "x"}]},
        )
        assert render_quiet(result) == "eq"

    def test_status_line(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="explain")) == "OK: explain"


class TestRenderError:
    def test_validation_error(self) -> None:
        result = ServiceResult.failure(
            "check_document",
            VALIDATION_FAILED,
            'Validation error in field "port"',
            detail={
                "kind": "validation",
                "field": "port",
                "type": "int",
                "rule": "gte",
                "param": "1",
            },
        )
        output = render_result(result)
        assert output.startswith("ERROR")
        assert "field: port" in output
        assert "rule: gte=1" in output
        assert "detail:" not in output

    def test_syntax_error_near(self) -> None:
        result = ServiceResult.failure(
            "explain",
            SYNTAX_ERROR,
            "Syntax error",
            detail={"kind": "syntax", "field": "", "near": "[gte=0", "comment": "x"},
        )
        assert "near: [gte=0" in render_result(result)

    def test_verbose_shows_detail(self) -> None:
        result = ServiceResult.failure(
            "check_record",
            VALIDATION_FAILED,
            "bad",
            detail={"kind": "validation", "field": "a", "rule": "nil", "param": ""},
        )
        output = render_result(result, verbose=True)
        assert "rule: nil" in output
        assert "detail:" in output
        assert "kind: validation" in output


class TestRenderOps:
    def test_check(self) -> None:
        result = ServiceResult(
            ok=True,
            op="check_document",
            data={"path": "doc.json", "rules": "rules.toml", "expression": None},
        )
        output = render_result(result)
        assert "path: doc.json" in output
        assert "rules: rules.toml" in output
        assert "expression" not in output

    def test_explain_outline(self) -> None:
        result = ServiceResult(
            ok=True,
            op="explain",
            data={
                "expression": "gte=1 > [nil=false]",
                "levels": [
                    {"depth": 0, "value": "gte=1", "groups": [["gte=1"]]},
                    {
                        "depth": 1,
                        "value": "",
                        "groups": [],
                        "key": [{"depth": 0, "value": "nil=false", "groups": [["nil=false"]]}],
                    },
                ],
            },
        )
        lines = render_result(result).splitlines()
        assert "  value: gte=1" in lines
        assert "  dive 1: (no rules)" in lines
        assert "    keys:" in lines
        assert "      value: nil=false" in lines

    def test_or_groups_joined(self) -> None:
        result = ServiceResult(
            ok=True,
            op="explain",
            data={
                "expression": "a & b | c",
                "levels": [{"depth": 0, "value": "a & b | c", "groups": [["a", "b"], ["c"]]}],
            },
        )
        assert "value: a & b | c" in render_result(result)

    def test_formats(self) -> None:
        result = ServiceResult(ok=True, op="list_formats", data={"formats": ["alpha", "email"]})
        output = render_result(result)
        assert "2 formats" in output
        assert "alpha, email" in output

    def test_predicates_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_predicates",
            data={"predicates": [{"name": "gte", "description": "greater or equal"}]},
        )
        output = render_result(result)
        assert "gte" in output
        assert "greater or equal" in output

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="custom", data={"items": [1, 2], "name": "x"})
        output = render_result(result)
        assert "items: [1,2]" in output
        assert "name: x" in output

    def test_verbose_telemetry(self) -> None:
        result = ServiceResult(
            ok=True,
            op="check_record",
            data={"record": "Port"},
            meta={"telemetry": {"name": "ValidationService.check_record", "duration_ms": 1.5}},
        )
        output = render_result(result, verbose=True)
        assert "meta:" in output
        assert "ValidationService.check_record" in output

"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from typing import Any

import pytest

from exprval.services.result import ServiceResult
from exprval.services.telemetry import (
    Span,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)

# ── Span ─────────────────────────────────────────────────────────────


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="s").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="s")
        time.sleep(0.002)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_omits_empty_parts(self) -> None:
        span = Span(name="root")
        span.end()
        data = span.to_dict()
        assert data["name"] == "root"
        assert "children" not in data
        assert "annotations" not in data

    def test_to_dict_nested(self) -> None:
        root = Span(name="root")
        child = root.child("child")
        assert child.parent is root
        child.annotate("rules", 3)
        child.end()
        root.end()
        data = root.to_dict()
        assert data["children"][0]["name"] == "child"
        assert data["children"][0]["annotations"] == {"rules": 3}


# ── trace_span / @traced ─────────────────────────────────────────────


class _Service:
    @traced
    def run(self) -> ServiceResult:
        with trace_span("load") as span:
            if span is not None:
                span.annotate("files", 1)
        with trace_span("evaluate"):
            pass
        return ServiceResult(ok=True, op="run")

    @traced
    def reject(self) -> ServiceResult:
        return ServiceResult.failure("reject", "VALIDATION_FAILED", "nope")

    @traced
    def plain(self) -> int:
        return 42

    @traced
    def explode(self) -> Any:
        with trace_span("inner"):
            raise RuntimeError("boom")


class TestDisabled:
    def test_no_meta(self) -> None:
        assert _Service().run().meta is None

    def test_trace_span_yields_none(self) -> None:
        with trace_span("orphan") as span:
            assert span is None

    def test_no_current_span(self) -> None:
        assert get_current_span() is None


class TestEnabled:
    def test_meta_injected(self) -> None:
        enable_telemetry()
        result = _Service().run()
        assert result.meta is not None
        tree = result.meta["telemetry"]
        assert tree["name"] == "_Service.run"
        assert [child["name"] for child in tree["children"]] == ["load", "evaluate"]
        assert tree["children"][0]["annotations"] == {"files": 1}

    def test_failure_tagged_with_code(self) -> None:
        enable_telemetry()
        result = _Service().reject()
        assert not result.ok
        assert result.meta is not None
        assert result.meta["telemetry"]["annotations"] == {"code": "VALIDATION_FAILED"}

    def test_non_result_passthrough(self) -> None:
        enable_telemetry()
        assert _Service().plain() == 42

    def test_exception_propagates_and_resets(self) -> None:
        enable_telemetry()
        with pytest.raises(RuntimeError, match="boom"):
            _Service().explode()
        assert get_current_span() is None

    def test_span_outside_traced_method(self) -> None:
        enable_telemetry()
        with trace_span("orphan") as span:
            assert span is None

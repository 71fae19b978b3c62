"""Tests for ServiceResult and ServiceError."""

import pytest

from exprval.services.result import (
    SYNTAX_ERROR,
    VALIDATION_FAILED,
    ServiceError,
    ServiceResult,
)


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="explain")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_helper(self) -> None:
        result = ServiceResult.failure(
            "check_document",
            VALIDATION_FAILED,
            "bad port",
            detail={"field": "port"},
            data={"path": "a.json"},
        )
        assert result.ok is False
        assert result.error == ServiceError(
            code=VALIDATION_FAILED, message="bad port", detail={"field": "port"}
        )
        assert result.data == {"path": "a.json"}

    def test_failure_without_detail(self) -> None:
        result = ServiceResult.failure("explain", SYNTAX_ERROR, "oops")
        assert result.error is not None
        assert result.error.detail == {}
        assert result.data == {}

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="explain")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]

    def test_json_dump(self) -> None:
        result = ServiceResult.failure("explain", SYNTAX_ERROR, "oops")
        dumped = result.model_dump(mode="json")
        assert dumped["error"]["code"] == SYNTAX_ERROR
        assert dumped["ok"] is False

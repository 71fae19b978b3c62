"""ServiceResult and ServiceError: the contract between services and the CLI.

INVARIANT: every service method returns a ServiceResult; validation and
loading failures never escape as exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Error codes
VALIDATION_FAILED = "VALIDATION_FAILED"
SYNTAX_ERROR = "SYNTAX_ERROR"
SELF_CHECK_FAILED = "SELF_CHECK_FAILED"
LOAD_FAILED = "LOAD_FAILED"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type of every service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"check_document"``).
        data: Operation-specific payload.
        warnings: Non-fatal issues encountered along the way.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry when ``--verbose``).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            data=data or {},
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )

"""Shared API error types and helpers."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from fastapi import HTTPException


class ApiErrorCode(StrEnum):
    """Machine-readable API error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_DUPLICATE_EMAIL = "AUTH_DUPLICATE_EMAIL"
    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    AUTH_MISSING_TOKEN = "AUTH_MISSING_TOKEN"
    AUTH_TOKEN_INVALID = "AUTH_TOKEN_INVALID"
    AUTH_TOKEN_EXPIRED = "AUTH_TOKEN_EXPIRED"
    APPLICATION_NOT_FOUND = "APPLICATION_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"
    REQUEST_TOO_LARGE = "REQUEST_TOO_LARGE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiError(HTTPException):
    """HTTP exception carrying stable API error envelope."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: ApiErrorCode,
        message: str,
        errors: dict[str, str] | None = None,
    ) -> None:
        detail: dict[str, Any] = {"error_code": str(error_code), "message": message}
        if errors is not None:
            detail["errors"] = errors
        super().__init__(status_code=status_code, detail=detail)

    @property
    def error_code(self) -> str:
        return str(self.detail["error_code"])


def validation_failed(errors: dict[str, str]) -> ApiError:
    """Build the 422 error for a normalized field->message mapping."""
    return ApiError(
        status_code=422,
        error_code=ApiErrorCode.VALIDATION_ERROR,
        message="Validation failed",
        errors=errors,
    )


def to_error_payload(detail: Any, status_code: int) -> dict[str, Any]:
    """Normalize HTTP exception detail into stable error payload."""
    if isinstance(detail, dict):
        error_code = str(detail.get("error_code") or f"HTTP_{status_code}")
        message = str(detail.get("message") or detail.get("detail") or "HTTP error")
        payload: dict[str, Any] = {"error_code": error_code, "message": message}
        if isinstance(detail.get("errors"), dict):
            payload["errors"] = detail["errors"]
        return payload
    if status_code == 404:
        return {"error_code": "NOT_FOUND", "message": str(detail or "Not Found")}
    return {
        "error_code": f"HTTP_{status_code}",
        "message": str(detail or "HTTP error"),
    }

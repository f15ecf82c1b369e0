"""Shared API error types and helpers."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from fastapi import HTTPException

from pollgate.auth.models import AuthFailure


class ApiErrorCode(StrEnum):
    """Machine-readable API error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    AUTH_SESSION_INVALID = "AUTH_SESSION_INVALID"
    AUTH_USER_NOT_FOUND = "AUTH_USER_NOT_FOUND"
    AUTH_EMAIL_TAKEN = "AUTH_EMAIL_TAKEN"
    AUTH_USERNAME_TAKEN = "AUTH_USERNAME_TAKEN"
    AUTH_CSRF_INVALID = "AUTH_CSRF_INVALID"
    AUTH_RATE_LIMITED = "AUTH_RATE_LIMITED"
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
        headers: dict[str, str] | None = None,
    ) -> None:
        """Build an HTTP exception with standard detail structure."""
        super().__init__(
            status_code=status_code,
            detail={"error_code": str(error_code), "message": message},
            headers=headers,
        )


_AUTH_FAILURE_ERRORS: dict[AuthFailure, tuple[int, ApiErrorCode, str]] = {
    AuthFailure.INVALID_CREDENTIALS: (
        401,
        ApiErrorCode.AUTH_INVALID_CREDENTIALS,
        "Invalid credentials",
    ),
    AuthFailure.SESSION_INVALID: (
        401,
        ApiErrorCode.AUTH_SESSION_INVALID,
        "Invalid or expired session",
    ),
    AuthFailure.USER_NOT_FOUND: (404, ApiErrorCode.AUTH_USER_NOT_FOUND, "User not found"),
    AuthFailure.EMAIL_TAKEN: (409, ApiErrorCode.AUTH_EMAIL_TAKEN, "Email already registered"),
    AuthFailure.USERNAME_TAKEN: (
        409,
        ApiErrorCode.AUTH_USERNAME_TAKEN,
        "Username already taken",
    ),
}


def auth_failure_error(failure: AuthFailure) -> ApiError:
    """Map an auth outcome failure onto its HTTP error."""
    status_code, error_code, message = _AUTH_FAILURE_ERRORS[failure]
    return ApiError(status_code=status_code, error_code=error_code, message=message)


def to_error_payload(detail: Any, status_code: int) -> dict[str, str]:
    """Normalize HTTP exception detail into stable error payload."""
    if isinstance(detail, dict):
        error_code = str(detail.get("error_code") or f"HTTP_{status_code}")
        message = str(detail.get("message") or detail.get("detail") or "HTTP error")
        return {"error_code": error_code, "message": message}
    return {
        "error_code": f"HTTP_{status_code}",
        "message": str(detail or "HTTP error"),
    }

"""Pydantic API response models used in OpenAPI contracts."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from pollgate.auth.models import PublicUser


class ApiErrorResponse(BaseModel):
    """Stable error envelope for API responses."""

    error_code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    """Health check response payload."""

    status: Literal["ok"]


class AuthUserResponse(BaseModel):
    """Authenticated user payload without credential material."""

    success: Literal[True] = True
    user: PublicUser


class LogoutResponse(BaseModel):
    """Logout response payload."""

    success: Literal[True] = True
    message: str = "Logged out successfully"


class CsrfTokenResponse(BaseModel):
    """One-time CSRF token payload."""

    csrf_token: str

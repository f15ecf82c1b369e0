"""Public API response contracts."""

from pollgate.api.contracts.models import (
    ApiErrorResponse,
    AuthUserResponse,
    CsrfTokenResponse,
    HealthResponse,
    LogoutResponse,
)

__all__ = [
    "ApiErrorResponse",
    "AuthUserResponse",
    "CsrfTokenResponse",
    "HealthResponse",
    "LogoutResponse",
]

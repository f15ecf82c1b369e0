"""HTTP middleware that enforces a session on protected API routes."""

from __future__ import annotations

from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse

from pollgate.api.contracts import ApiErrorResponse
from pollgate.api.errors import ApiErrorCode
from pollgate.auth.cookies import get_session_token
from pollgate.auth.sessions import SessionStore
from pollgate.core.config import AuthConfig

PUBLIC_API_PATHS = frozenset({"/api/health"})
PUBLIC_API_PREFIXES = ("/api/auth/",)


def is_public_api_path(path: str) -> bool:
    if path in PUBLIC_API_PATHS:
        return True
    return any(path.startswith(prefix) for prefix in PUBLIC_API_PREFIXES)


def create_auth_middleware(sessions: SessionStore, config: AuthConfig) -> Callable:
    """Create middleware function that validates the session cookie."""

    async def auth_middleware(request: Request, call_next: Callable):
        """Reject protected API paths without an active session."""
        path = request.url.path
        if not path.startswith("/api/") or is_public_api_path(path):
            return await call_next(request)

        token = get_session_token(request, config)
        user_id = sessions.validate(token) if token else None
        if user_id is None:
            return JSONResponse(
                status_code=401,
                content=ApiErrorResponse(
                    error_code=ApiErrorCode.AUTH_REQUIRED,
                    message="Authentication required",
                ).model_dump(),
            )

        request.state.user_id = user_id
        return await call_next(request)

    return auth_middleware

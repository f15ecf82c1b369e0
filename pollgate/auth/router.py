"""Authentication API router."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

from fastapi import APIRouter, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from pollgate.api.contracts import (
    ApiErrorResponse,
    AuthUserResponse,
    CsrfTokenResponse,
    LogoutResponse,
)
from pollgate.api.errors import ApiError, ApiErrorCode, auth_failure_error, to_error_payload
from pollgate.auth.cookies import (
    clear_session_cookie,
    client_address,
    get_session_token,
    set_session_cookie,
)
from pollgate.auth.csrf import CsrfTokenStore
from pollgate.auth.models import AuthFailure, LoginRequest, RegisterRequest
from pollgate.auth.rate_limiter import FixedWindowRateLimiter
from pollgate.auth.service import AuthService
from pollgate.core.config import AppConfig

LOGGER = logging.getLogger(__name__)

BodyModel = TypeVar("BodyModel", bound=BaseModel)


def _json_body(model: type[BaseModel]) -> dict[str, Any]:
    """OpenAPI request body for endpoints that parse the body themselves."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


@dataclass(frozen=True)
class AuthRouteDeps:
    """Collaborators shared by the auth endpoints."""

    config: AppConfig
    service: AuthService
    rate_limiter: FixedWindowRateLimiter
    csrf_tokens: CsrfTokenStore


def create_auth_router(deps: AuthRouteDeps) -> APIRouter:
    """Build authentication router with register/login/logout/session endpoints."""
    router = APIRouter(tags=["auth"])
    auth_config = deps.config.auth
    security = deps.config.security

    def enforce_rate_limit(action: str, request: Request, message: str) -> None:
        key = f"{action}:{client_address(request)}"
        allowed = deps.rate_limiter.check(
            key,
            security.rate_limit_max_requests,
            security.rate_limit_window_seconds,
        )
        if not allowed:
            LOGGER.warning("rate_limited", extra={"rate_limit_key": key})
            raise ApiError(
                status_code=429,
                error_code=ApiErrorCode.AUTH_RATE_LIMITED,
                message=message,
                headers={"Retry-After": str(deps.rate_limiter.retry_after(key))},
            )

    def enforce_csrf(token: str | None) -> None:
        if not auth_config.csrf_required:
            return
        if not token or not deps.csrf_tokens.consume(token):
            raise ApiError(
                status_code=403,
                error_code=ApiErrorCode.AUTH_CSRF_INVALID,
                message="Missing or invalid CSRF token",
            )

    @router.get("/api/auth/csrf", response_model=CsrfTokenResponse)
    def issue_csrf_token() -> CsrfTokenResponse:
        """Issue a single-use CSRF token."""
        return CsrfTokenResponse(csrf_token=deps.csrf_tokens.issue())

    async def parse_body(request: Request, model: type[BodyModel]) -> BodyModel:
        try:
            return model.model_validate_json(await request.body())
        except ValidationError as exc:
            raise RequestValidationError(exc.errors(include_url=False)) from exc

    @router.post(
        "/api/auth/register",
        response_model=AuthUserResponse,
        responses={
            403: {"model": ApiErrorResponse},
            409: {"model": ApiErrorResponse},
            422: {"model": ApiErrorResponse},
            429: {"model": ApiErrorResponse},
        },
        openapi_extra=_json_body(RegisterRequest),
    )
    async def register(
        request: Request,
        response: Response,
        x_csrf_token: str | None = Header(default=None),
    ) -> AuthUserResponse:
        """Create account, open a session and set the session cookie."""
        enforce_rate_limit(
            "register", request, "Too many registration attempts. Please try again later."
        )
        enforce_csrf(x_csrf_token)
        req = await parse_body(request, RegisterRequest)
        outcome = await run_in_threadpool(
            deps.service.register, req.username, req.email, req.password
        )
        if not outcome.ok:
            raise auth_failure_error(outcome.failure)
        set_session_cookie(response, outcome.session_token, auth_config)
        return AuthUserResponse(user=outcome.user)

    @router.post(
        "/api/auth/login",
        response_model=AuthUserResponse,
        responses={
            401: {"model": ApiErrorResponse},
            403: {"model": ApiErrorResponse},
            422: {"model": ApiErrorResponse},
            429: {"model": ApiErrorResponse},
        },
        openapi_extra=_json_body(LoginRequest),
    )
    async def login(
        request: Request,
        response: Response,
        x_csrf_token: str | None = Header(default=None),
    ) -> AuthUserResponse:
        """Verify credentials and set the session cookie."""
        enforce_rate_limit(
            "login", request, "Too many login attempts. Please try again later."
        )
        enforce_csrf(x_csrf_token)
        req = await parse_body(request, LoginRequest)
        outcome = await run_in_threadpool(
            deps.service.login, req.username_or_email, req.password
        )
        if not outcome.ok:
            raise auth_failure_error(outcome.failure)
        set_session_cookie(response, outcome.session_token, auth_config)
        return AuthUserResponse(user=outcome.user)

    @router.post(
        "/api/auth/logout",
        response_model=LogoutResponse,
        responses={403: {"model": ApiErrorResponse}},
    )
    def logout(
        request: Request,
        response: Response,
        x_csrf_token: str | None = Header(default=None),
    ) -> LogoutResponse:
        """Destroy the current session, if any, and clear the cookie."""
        enforce_csrf(x_csrf_token)
        deps.service.logout(get_session_token(request, auth_config))
        clear_session_cookie(response, auth_config)
        return LogoutResponse()

    @router.get(
        "/api/auth/session",
        response_model=AuthUserResponse,
        responses={401: {"model": ApiErrorResponse}, 404: {"model": ApiErrorResponse}},
    )
    def current_session(request: Request):
        """Return the user owning the session cookie."""
        outcome = deps.service.resolve(get_session_token(request, auth_config))
        if outcome.ok:
            return AuthUserResponse(user=outcome.user)

        error = auth_failure_error(outcome.failure)
        rejected = JSONResponse(
            status_code=error.status_code,
            content=to_error_payload(error.detail, error.status_code),
        )
        if outcome.failure == AuthFailure.SESSION_INVALID:
            clear_session_cookie(rejected, auth_config)
        return rejected

    return router

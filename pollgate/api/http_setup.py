"""Request guards, response headers and error envelopes for the auth API."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pollgate.api.contracts import ApiErrorResponse
from pollgate.api.errors import ApiErrorCode, to_error_payload
from pollgate.core.config import AppConfig
from pollgate.core.logging import set_correlation_id

# Auth responses carry session state and must never be cached or framed.
RESPONSE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


def _log_extra(request: Request, status_code: int) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
    }


def _declared_length(request: Request) -> int:
    """Content-Length as sent by the client; unparsable values count as zero."""
    try:
        return int(request.headers.get("content-length") or 0)
    except ValueError:
        return 0


def _envelope(status_code: int, error_code: ApiErrorCode, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiErrorResponse(error_code=error_code, message=message).model_dump(),
    )


def register_http_middleware(app: FastAPI, *, config: AppConfig, logger: Any) -> None:
    """Install the body size guard and the request-id/header middleware."""
    max_bytes = config.security.request_max_bytes

    @app.middleware("http")
    async def request_size_limit_middleware(request: Request, call_next):
        if _declared_length(request) > max_bytes:
            return _envelope(
                413,
                ApiErrorCode.REQUEST_TOO_LARGE,
                f"Request size exceeds configured limit ({max_bytes} bytes).",
            )
        return await call_next(request)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        request_id = (
            request.headers.get("x-request-id")
            or request.headers.get("x-correlation-id")
            or uuid.uuid4().hex
        )
        set_correlation_id(request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        response.headers.update(RESPONSE_HEADERS)
        logger.info("request_completed", extra=_log_extra(request, response.status_code))
        return response


def register_exception_handlers(app: FastAPI, *, logger: Any) -> None:
    """Serialize every failure into the ``{error_code, message}`` envelope."""

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        payload = to_error_payload(exc.detail, exc.status_code)
        logger.warning("http_exception", extra=_log_extra(request, exc.status_code))
        return JSONResponse(
            status_code=exc.status_code,
            content=ApiErrorResponse(**payload).model_dump(),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_exception(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("validation_exception", extra=_log_extra(request, 422))
        # Field names and messages only; submitted values may hold passwords.
        problems = [
            ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            + f": {error.get('msg', 'invalid')}"
            for error in exc.errors()
        ]
        message = " ".join(["Invalid input data.", ", ".join(problems)]).strip()
        return _envelope(422, ApiErrorCode.VALIDATION_ERROR, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unexpected_exception", extra=_log_extra(request, 500))
        return _envelope(500, ApiErrorCode.INTERNAL_SERVER_ERROR, "Internal server error")

"""Session cookie and client address helpers for HTTP handlers."""

from __future__ import annotations

from fastapi import Request, Response

from pollgate.core.config import AuthConfig


def set_session_cookie(response: Response, token: str, config: AuthConfig) -> None:
    """Attach the session token as an http-only cookie."""
    response.set_cookie(
        key=config.session_cookie_name,
        value=token,
        max_age=config.session_ttl_seconds,
        path="/",
        secure=config.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response, config: AuthConfig) -> None:
    response.delete_cookie(
        key=config.session_cookie_name,
        path="/",
        secure=config.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def get_session_token(request: Request, config: AuthConfig) -> str | None:
    return request.cookies.get(config.session_cookie_name) or None


def client_address(request: Request) -> str:
    """Resolve caller address from X-Forwarded-For, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",", 1)[0].strip()
    if first_hop:
        return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "unknown"

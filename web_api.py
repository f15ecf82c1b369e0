from __future__ import annotations

import logging
import time
from typing import Callable

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pollgate.api.contracts import HealthResponse
from pollgate.api.http_setup import register_exception_handlers, register_http_middleware
from pollgate.auth.csrf import CsrfTokenStore
from pollgate.auth.middleware import create_auth_middleware
from pollgate.auth.rate_limiter import FixedWindowRateLimiter
from pollgate.auth.repository import CredentialRepository
from pollgate.auth.router import AuthRouteDeps, create_auth_router
from pollgate.auth.service import AuthService
from pollgate.auth.sessions import SessionStore
from pollgate.core.config import AppConfig
from pollgate.core.logging import setup_logging
from pollgate.core.security import PasswordHasher

load_dotenv()
APP_CONFIG = AppConfig.from_env()
setup_logging(APP_CONFIG.logging.level)
LOGGER = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None, *, clock: Callable[[], float] = time.time
) -> FastAPI:
    config = config or APP_CONFIG
    app = FastAPI(title="Pollgate Auth API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.security.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-CSRF-Token"],
    )

    # Stores live for the process; handlers share them through the router deps.
    hasher = PasswordHasher(config.auth.password_hash_cost)
    sessions = SessionStore(ttl_seconds=config.auth.session_ttl_seconds, clock=clock)
    rate_limiter = FixedWindowRateLimiter(clock=clock)
    auth_service = AuthService(
        repo=CredentialRepository(),
        sessions=sessions,
        hasher=hasher,
        config=config.auth,
    )
    auth_service.bootstrap_user()

    app.middleware("http")(create_auth_middleware(sessions, config.auth))
    register_http_middleware(app, config=config, logger=LOGGER)
    register_exception_handlers(app, logger=LOGGER)
    app.include_router(
        create_auth_router(
            AuthRouteDeps(
                config=config,
                service=auth_service,
                rate_limiter=rate_limiter,
                csrf_tokens=CsrfTokenStore(),
            )
        )
    )

    @app.get("/api/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok")

    app.state.sessions = sessions
    app.state.rate_limiter = rate_limiter
    app.state.auth_service = auth_service
    return app


app = create_app()

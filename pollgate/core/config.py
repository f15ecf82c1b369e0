"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

MIN_PASSWORD_HASH_COST = 10


class ConfigError(RuntimeError):
    """Raised at startup when configuration would weaken security."""


@dataclass(frozen=True)
class AuthConfig:
    """Authentication-related configuration."""

    password_hash_cost: int
    session_ttl_seconds: int
    session_cookie_name: str
    cookie_secure: bool
    csrf_required: bool = False
    bootstrap_username: str = ""
    bootstrap_email: str = ""
    bootstrap_password: str = ""


@dataclass(frozen=True)
class LoggingConfig:
    """Structured logging configuration."""

    level: str


@dataclass(frozen=True)
class SecurityConfig:
    """API perimeter security settings."""

    cors_allowed_origins: list[str]
    request_max_bytes: int
    rate_limit_max_requests: int
    rate_limit_window_seconds: int


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    environment: str
    auth: AuthConfig
    logging: LoggingConfig
    security: SecurityConfig

    @staticmethod
    def from_env() -> "AppConfig":
        """Build app config from process environment."""
        environment = os.getenv("APP_ENV", "development").strip().lower() or "development"
        hash_cost_raw = os.getenv("PASSWORD_HASH_COST", "17").strip()
        try:
            hash_cost = int(hash_cost_raw)
        except ValueError as exc:
            raise ConfigError(
                f"PASSWORD_HASH_COST must be an integer, got {hash_cost_raw!r}"
            ) from exc
        session_ttl = int(os.getenv("SESSION_TTL_SECONDS", str(7 * 24 * 60 * 60)))
        cookie_name = (
            os.getenv("SESSION_COOKIE_NAME", "poll_session").strip() or "poll_session"
        )
        bootstrap_username = os.getenv("AUTH_BOOTSTRAP_USERNAME", "").strip()
        bootstrap_email = os.getenv("AUTH_BOOTSTRAP_EMAIL", "").strip()
        bootstrap_password = os.getenv("AUTH_BOOTSTRAP_PASSWORD", "").strip()
        csrf_required = os.getenv("AUTH_CSRF_REQUIRED", "0").strip().lower() in {
            "1",
            "true",
            "yes",
            "on",
        }
        rate_limit_max_requests = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
        rate_limit_window_seconds = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))
        log_level = os.getenv("LOG_LEVEL", "INFO").strip() or "INFO"
        cors_allowed_origins = [
            origin.strip()
            for origin in os.getenv(
                "CORS_ALLOWED_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if origin.strip()
        ]
        request_max_bytes = int(os.getenv("REQUEST_MAX_BYTES", str(1024 * 1024)))

        if session_ttl <= 0:
            raise ConfigError("SESSION_TTL_SECONDS must be positive")

        return AppConfig(
            environment=environment,
            auth=AuthConfig(
                password_hash_cost=hash_cost,
                session_ttl_seconds=session_ttl,
                session_cookie_name=cookie_name,
                cookie_secure=environment == "production",
                csrf_required=csrf_required,
                bootstrap_username=bootstrap_username,
                bootstrap_email=bootstrap_email,
                bootstrap_password=bootstrap_password,
            ),
            logging=LoggingConfig(level=log_level),
            security=SecurityConfig(
                cors_allowed_origins=cors_allowed_origins,
                request_max_bytes=request_max_bytes,
                rate_limit_max_requests=max(1, rate_limit_max_requests),
                rate_limit_window_seconds=max(1, rate_limit_window_seconds),
            ),
        )

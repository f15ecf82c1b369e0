"""Pydantic models for authentication domain."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class CredentialRecord(BaseModel):
    """Registered account held by the credential repository."""

    user_id: str
    username: str
    email: str
    password_hash: str
    created_at: str


class PublicUser(BaseModel):
    """Account fields safe to return to clients."""

    id: str
    username: str
    email: str
    created_at: str

    @classmethod
    def from_record(cls, record: CredentialRecord) -> "PublicUser":
        return cls(
            id=record.user_id,
            username=record.username,
            email=record.email,
            created_at=record.created_at,
        )


class SessionRecord(BaseModel):
    """Active session entry keyed by its opaque token."""

    user_id: str
    expires_at: float


class RateLimitCounter(BaseModel):
    """Fixed-window request counter for one key."""

    count: int = Field(ge=0)
    window_reset_at: float


class RegistrationConflict(StrEnum):
    """Unique field that blocked a registration."""

    USER_ID = "user_id"
    EMAIL = "email"
    USERNAME = "username"


class AuthFailure(StrEnum):
    """Expected failure outcomes of auth flows."""

    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_TAKEN = "email_taken"
    USERNAME_TAKEN = "username_taken"
    SESSION_INVALID = "session_invalid"
    USER_NOT_FOUND = "user_not_found"


class AuthOutcome(BaseModel):
    """Result of an auth flow: either a user (and maybe a token) or a failure."""

    user: PublicUser | None = None
    session_token: str = ""
    failure: AuthFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def failed(cls, failure: AuthFailure) -> "AuthOutcome":
        return cls(failure=failure)


class RegisterRequest(BaseModel):
    """Registration request payload."""

    username: str = Field(min_length=3, max_length=20)
    email: str = Field(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    password: str = Field(min_length=6, max_length=100)


class LoginRequest(BaseModel):
    """Login request payload."""

    username_or_email: str = Field(min_length=1)
    password: str = Field(min_length=6)

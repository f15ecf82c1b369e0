"""Authentication service for registration, login and session resolution."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from pollgate.auth.models import (
    AuthFailure,
    AuthOutcome,
    CredentialRecord,
    PublicUser,
    RegistrationConflict,
)
from pollgate.auth.repository import CredentialRepository
from pollgate.auth.sessions import SessionStore
from pollgate.core.config import AuthConfig
from pollgate.core.sanitize import sanitize_input
from pollgate.core.security import PasswordHasher

LOGGER = logging.getLogger(__name__)

_CONFLICT_FAILURES = {
    RegistrationConflict.EMAIL: AuthFailure.EMAIL_TAKEN,
    RegistrationConflict.USERNAME: AuthFailure.USERNAME_TAKEN,
}


class AuthService:
    """Authentication domain service.

    Expected failures come back as ``AuthOutcome.failure``; only programming
    and configuration errors raise.
    """

    def __init__(
        self,
        *,
        repo: CredentialRepository,
        sessions: SessionStore,
        hasher: PasswordHasher,
        config: AuthConfig,
    ) -> None:
        """Initialize service dependencies."""
        self._repo = repo
        self._sessions = sessions
        self._hasher = hasher
        self._config = config
        # Checked against when the account is unknown.
        self._decoy_hash = hasher.hash(uuid.uuid4().hex)

    def bootstrap_user(self) -> None:
        """Ensure the configured seed account exists."""
        username = self._config.bootstrap_username
        email = self._config.bootstrap_email
        password = self._config.bootstrap_password
        if not (username and email and password):
            return
        if self._repo.get_by_email(sanitize_input(email)) is not None:
            return
        outcome = self._create_account(username, email, password)
        if outcome.ok:
            LOGGER.info("bootstrap_user_created", extra={"user_id": outcome.user.id})
        else:
            LOGGER.warning("bootstrap_user_skipped reason=%s", outcome.failure)

    def register(self, username: str, email: str, password: str) -> AuthOutcome:
        """Create account and open a session for it."""
        outcome = self._create_account(username, email, password)
        if not outcome.ok:
            return outcome
        token = self._sessions.create(outcome.user.id)
        LOGGER.info("user_registered", extra={"user_id": outcome.user.id})
        return outcome.model_copy(update={"session_token": token})

    def _create_account(self, username: str, email: str, password: str) -> AuthOutcome:
        clean_username = sanitize_input(username)
        clean_email = sanitize_input(email)

        # Duplicate checks run before hashing.
        if self._repo.get_by_email(clean_email) is not None:
            return AuthOutcome.failed(AuthFailure.EMAIL_TAKEN)
        if self._repo.get_by_username(clean_username) is not None:
            return AuthOutcome.failed(AuthFailure.USERNAME_TAKEN)

        record = CredentialRecord(
            user_id=uuid.uuid4().hex,
            username=clean_username,
            email=clean_email,
            password_hash=self._hasher.hash(password),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        conflict = self._repo.add(record)
        if conflict is not None:
            if conflict not in _CONFLICT_FAILURES:
                raise RuntimeError(f"Generated user id collided: {record.user_id}")
            return AuthOutcome.failed(_CONFLICT_FAILURES[conflict])
        return AuthOutcome(user=PublicUser.from_record(record))

    def login(self, username_or_email: str, password: str) -> AuthOutcome:
        """Verify credentials and open a session."""
        record = self._repo.get_by_username_or_email(sanitize_input(username_or_email))
        if record is None:
            self._hasher.verify(password, self._decoy_hash)
            return AuthOutcome.failed(AuthFailure.INVALID_CREDENTIALS)
        if not self._hasher.verify(password, record.password_hash):
            return AuthOutcome.failed(AuthFailure.INVALID_CREDENTIALS)
        token = self._sessions.create(record.user_id)
        LOGGER.info("login_succeeded", extra={"user_id": record.user_id})
        return AuthOutcome(user=PublicUser.from_record(record), session_token=token)

    def logout(self, session_token: str | None) -> None:
        """Destroy the session when a token is supplied."""
        if session_token:
            self._sessions.destroy(session_token)

    def resolve(self, session_token: str | None) -> AuthOutcome:
        """Return the user owning an active session."""
        if not session_token:
            return AuthOutcome.failed(AuthFailure.SESSION_INVALID)
        user_id = self._sessions.validate(session_token)
        if user_id is None:
            return AuthOutcome.failed(AuthFailure.SESSION_INVALID)
        record = self._repo.get_by_id(user_id)
        if record is None:
            return AuthOutcome.failed(AuthFailure.USER_NOT_FOUND)
        return AuthOutcome(user=PublicUser.from_record(record))

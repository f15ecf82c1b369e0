"""Opaque bearer-token session store with absolute expiry."""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable

from pollgate.auth.models import SessionRecord
from pollgate.core.logging import token_prefix
from pollgate.core.security import generate_secure_token

LOGGER = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 7 * 24 * 60 * 60


class SessionStore:
    """Map session tokens to owner ids until destroyed or expired.

    Expiry is fixed at creation and never extended by use. Expired entries
    are dropped lazily when looked up; nothing sweeps them in the background.
    """

    def __init__(
        self,
        *,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        token_factory: Callable[[], str] = generate_secure_token,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("Session ttl must be positive")
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._token_factory = token_factory
        self._lock = Lock()
        self._sessions: dict[str, SessionRecord] = {}

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, user_id: str) -> str:
        """Issue a new token for user and return it."""
        token = self._token_factory()
        with self._lock:
            self._sessions[token] = SessionRecord(
                user_id=user_id, expires_at=self._clock() + self._ttl_seconds
            )
            active = len(self._sessions)
        LOGGER.info(
            "session_created",
            extra={"user_id": user_id, "token_prefix": token_prefix(token)},
        )
        LOGGER.debug("session_store_size %s", active)
        return token

    def validate(self, token: str) -> str | None:
        """Return owner id for an active token, ``None`` otherwise."""
        with self._lock:
            record = self._sessions.get(token)
            if record is None:
                return None
            if self._clock() < record.expires_at:
                return record.user_id
            del self._sessions[token]
        LOGGER.info("session_expired", extra={"token_prefix": token_prefix(token)})
        return None

    def destroy(self, token: str) -> None:
        """Remove token; unknown tokens are ignored."""
        with self._lock:
            self._sessions.pop(token, None)

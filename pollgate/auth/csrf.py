"""Single-use CSRF tokens."""

from __future__ import annotations

from threading import Lock

from pollgate.core.security import generate_secure_token


class CsrfTokenStore:
    """Issue tokens that validate exactly once."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._tokens: set[str] = set()

    def issue(self) -> str:
        token = generate_secure_token()
        with self._lock:
            self._tokens.add(token)
        return token

    def consume(self, token: str) -> bool:
        """Return True and forget token if it was issued and unused."""
        with self._lock:
            if token in self._tokens:
                self._tokens.discard(token)
                return True
            return False

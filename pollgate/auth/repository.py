"""In-memory credential repository with unique id, username and email."""

from __future__ import annotations

from threading import Lock

from pollgate.auth.models import CredentialRecord, RegistrationConflict


class CredentialRepository:
    """Process-local account store; contents are lost on restart."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._by_id: dict[str, CredentialRecord] = {}
        self._id_by_username: dict[str, str] = {}
        self._id_by_email: dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    def add(self, record: CredentialRecord) -> RegistrationConflict | None:
        """Insert record unless one of its unique fields is already taken."""
        with self._lock:
            if record.email in self._id_by_email:
                return RegistrationConflict.EMAIL
            if record.username in self._id_by_username:
                return RegistrationConflict.USERNAME
            if record.user_id in self._by_id:
                return RegistrationConflict.USER_ID
            self._by_id[record.user_id] = record
            self._id_by_username[record.username] = record.user_id
            self._id_by_email[record.email] = record.user_id
            return None

    def get_by_id(self, user_id: str) -> CredentialRecord | None:
        with self._lock:
            return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> CredentialRecord | None:
        with self._lock:
            user_id = self._id_by_email.get(email)
            return self._by_id.get(user_id) if user_id else None

    def get_by_username(self, username: str) -> CredentialRecord | None:
        with self._lock:
            user_id = self._id_by_username.get(username)
            return self._by_id.get(user_id) if user_id else None

    def get_by_username_or_email(self, identifier: str) -> CredentialRecord | None:
        """Resolve a login identifier against email first, then username."""
        return self.get_by_email(identifier) or self.get_by_username(identifier)

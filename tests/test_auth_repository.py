from __future__ import annotations

from pollgate.auth.models import CredentialRecord, RegistrationConflict
from pollgate.auth.repository import CredentialRepository


def _record(user_id: str, username: str, email: str) -> CredentialRecord:
    return CredentialRecord(
        user_id=user_id,
        username=username,
        email=email,
        password_hash="hash",
        created_at="2024-01-01T00:00:00+00:00",
    )


def test_credential_repository_add_and_lookup_by_each_key() -> None:
    repo = CredentialRepository()

    assert repo.add(_record("u1", "alice", "alice@test.local")) is None

    assert repo.get_by_id("u1") is not None
    assert repo.get_by_username("alice").user_id == "u1"
    assert repo.get_by_email("alice@test.local").user_id == "u1"
    assert repo.get_by_username_or_email("alice").user_id == "u1"
    assert repo.get_by_username_or_email("alice@test.local").user_id == "u1"
    assert len(repo) == 1


def test_credential_repository_username_is_case_sensitive() -> None:
    repo = CredentialRepository()
    repo.add(_record("u1", "alice", "alice@test.local"))

    assert repo.get_by_username("Alice") is None
    assert repo.add(_record("u2", "Alice", "other@test.local")) is None


def test_credential_repository_reports_conflicts_without_mutating() -> None:
    repo = CredentialRepository()
    repo.add(_record("u1", "alice", "alice@test.local"))

    assert repo.add(_record("u2", "bob", "alice@test.local")) == RegistrationConflict.EMAIL
    assert repo.add(_record("u3", "alice", "bob@test.local")) == RegistrationConflict.USERNAME
    assert repo.add(_record("u1", "bob", "bob@test.local")) == RegistrationConflict.USER_ID
    assert repo.add(_record("u4", "alice", "alice@test.local")) == RegistrationConflict.EMAIL

    assert len(repo) == 1
    assert repo.get_by_username("bob") is None


def test_credential_repository_missing_lookups_return_none() -> None:
    repo = CredentialRepository()

    assert repo.get_by_id("nope") is None
    assert repo.get_by_email("nope@test.local") is None
    assert repo.get_by_username_or_email("nope") is None

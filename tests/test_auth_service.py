from __future__ import annotations

from dataclasses import replace

from pollgate.auth.models import AuthFailure
from pollgate.auth.repository import CredentialRepository
from pollgate.auth.service import AuthService
from pollgate.auth.sessions import SessionStore
from pollgate.core.config import AuthConfig
from pollgate.core.security import PasswordHasher
from tests.factories import TEST_HASH_COST, FakeClock, build_config


def _build_service(
    config: AuthConfig | None = None, clock: FakeClock | None = None
) -> tuple[AuthService, CredentialRepository, SessionStore]:
    auth_config = config or build_config().auth
    repo = CredentialRepository()
    sessions = SessionStore(
        ttl_seconds=auth_config.session_ttl_seconds, clock=clock or FakeClock()
    )
    service = AuthService(
        repo=repo,
        sessions=sessions,
        hasher=PasswordHasher(TEST_HASH_COST),
        config=auth_config,
    )
    return service, repo, sessions


def test_auth_service_register_creates_account_and_session() -> None:
    service, repo, sessions = _build_service()

    outcome = service.register("alice", "alice@test.local", "secret1")

    assert outcome.ok
    assert outcome.user is not None
    assert outcome.user.username == "alice"
    assert sessions.validate(outcome.session_token) == outcome.user.id
    stored = repo.get_by_id(outcome.user.id)
    assert stored is not None
    assert stored.password_hash != "secret1"
    assert "password_hash" not in outcome.user.model_dump()


def test_auth_service_register_sanitizes_username_and_email() -> None:
    service, repo, _ = _build_service()

    outcome = service.register("  <bob>  ", "bob@test.local ", "secret1")

    assert outcome.user is not None
    assert outcome.user.username == "&lt;bob&gt;"
    assert outcome.user.email == "bob@test.local"
    assert repo.get_by_username("&lt;bob&gt;") is not None


def test_auth_service_register_rejects_duplicates() -> None:
    service, _, _ = _build_service()
    service.register("alice", "alice@test.local", "secret1")

    by_email = service.register("alice2", "alice@test.local", "secret1")
    by_username = service.register("alice", "other@test.local", "secret1")

    assert by_email.failure == AuthFailure.EMAIL_TAKEN
    assert by_username.failure == AuthFailure.USERNAME_TAKEN
    assert by_email.session_token == ""


def test_auth_service_login_by_username_or_email() -> None:
    service, _, sessions = _build_service()
    registered = service.register("alice", "alice@test.local", "secret1")

    by_name = service.login("alice", "secret1")
    by_email = service.login(" alice@test.local ", "secret1")

    assert by_name.ok and by_email.ok
    assert by_name.user == registered.user
    assert by_name.session_token != by_email.session_token
    assert sessions.validate(by_email.session_token) == registered.user.id


def test_auth_service_login_failures_are_indistinguishable() -> None:
    service, _, _ = _build_service()
    service.register("alice", "alice@test.local", "secret1")

    wrong_password = service.login("alice", "wrong-password")
    unknown_user = service.login("mallory", "secret1")

    assert wrong_password == unknown_user
    assert wrong_password.failure == AuthFailure.INVALID_CREDENTIALS


def test_auth_service_logout_then_resolve_is_invalid() -> None:
    service, _, _ = _build_service()
    token = service.register("alice", "alice@test.local", "secret1").session_token

    service.logout(token)
    service.logout(token)
    service.logout(None)

    assert service.resolve(token).failure == AuthFailure.SESSION_INVALID


def test_auth_service_resolve_expired_matches_missing() -> None:
    clock = FakeClock()
    service, _, _ = _build_service(clock=clock)
    token = service.register("alice", "alice@test.local", "secret1").session_token
    assert service.resolve(token).user is not None

    clock.advance(build_config().auth.session_ttl_seconds + 1)

    assert service.resolve(token) == service.resolve(None)
    assert service.resolve(token) == service.resolve("bogus")


def test_auth_service_resolve_reports_missing_account() -> None:
    service, _, sessions = _build_service()
    token = sessions.create("ghost")

    assert service.resolve(token).failure == AuthFailure.USER_NOT_FOUND


def test_auth_service_bootstrap_user_is_created_once() -> None:
    config = replace(
        build_config().auth,
        bootstrap_username="admin",
        bootstrap_email="admin@test.local",
        bootstrap_password="admin123",
    )
    service, repo, sessions = _build_service(config=config)

    service.bootstrap_user()
    service.bootstrap_user()

    assert len(repo) == 1
    assert len(sessions) == 0
    assert service.login("admin", "admin123").ok


def test_auth_service_bootstrap_user_skipped_without_config() -> None:
    service, repo, _ = _build_service()

    service.bootstrap_user()

    assert len(repo) == 0

from __future__ import annotations

from pollgate.auth.csrf import CsrfTokenStore


def test_csrf_token_validates_exactly_once() -> None:
    store = CsrfTokenStore()
    token = store.issue()

    assert store.consume(token) is True
    assert store.consume(token) is False


def test_csrf_rejects_unissued_token() -> None:
    store = CsrfTokenStore()
    store.issue()

    assert store.consume("forged") is False
    assert store.consume("") is False

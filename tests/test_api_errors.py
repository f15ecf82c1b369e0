from __future__ import annotations

import pytest

from pollgate.api.errors import auth_failure_error, to_error_payload
from pollgate.auth.models import AuthFailure


def test_to_error_payload_preserves_structured_detail() -> None:
    payload = to_error_payload(
        {"error_code": "AUTH_SESSION_INVALID", "message": "Invalid"},
        401,
    )

    assert payload == {"error_code": "AUTH_SESSION_INVALID", "message": "Invalid"}


def test_to_error_payload_normalizes_plain_string() -> None:
    payload = to_error_payload("boom", 500)

    assert payload == {"error_code": "HTTP_500", "message": "boom"}


@pytest.mark.parametrize(
    ("failure", "status_code", "error_code"),
    [
        (AuthFailure.INVALID_CREDENTIALS, 401, "AUTH_INVALID_CREDENTIALS"),
        (AuthFailure.SESSION_INVALID, 401, "AUTH_SESSION_INVALID"),
        (AuthFailure.USER_NOT_FOUND, 404, "AUTH_USER_NOT_FOUND"),
        (AuthFailure.EMAIL_TAKEN, 409, "AUTH_EMAIL_TAKEN"),
        (AuthFailure.USERNAME_TAKEN, 409, "AUTH_USERNAME_TAKEN"),
    ],
)
def test_auth_failure_error_maps_every_failure(
    failure: AuthFailure, status_code: int, error_code: str
) -> None:
    error = auth_failure_error(failure)

    assert error.status_code == status_code
    assert error.detail["error_code"] == error_code

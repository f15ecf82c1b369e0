"""Security primitives for password hashing and opaque token generation."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets

from pollgate.core.config import MIN_PASSWORD_HASH_COST, ConfigError

_ALGORITHM = "pbkdf2_sha256"
_SALT_BYTES = 16
_MAX_COST = 31
SESSION_TOKEN_BYTES = 32


def _b64url_encode(raw: bytes) -> str:
    """Return URL-safe base64 string without padding."""
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64url_decode(value: str) -> bytes:
    """Decode URL-safe base64 string with optional missing padding."""
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode((value + padding).encode("utf-8"))


def generate_secure_token(num_bytes: int = SESSION_TOKEN_BYTES) -> str:
    """Return a hex-encoded token drawn from the OS CSPRNG."""
    return secrets.token_hex(num_bytes)


class PasswordHasher:
    """Salted PBKDF2-HMAC-SHA256 hasher with a log2 work factor.

    ``cost`` is an exponent: each hash runs ``2 ** cost`` iterations. Stored
    hashes carry their own cost, so raising the configured cost does not
    invalidate existing records.
    """

    def __init__(self, cost: int | None) -> None:
        if cost is None or isinstance(cost, bool) or not isinstance(cost, int):
            raise ConfigError("Password hash cost must be configured as an integer")
        if cost < MIN_PASSWORD_HASH_COST or cost > _MAX_COST:
            raise ConfigError(
                f"Password hash cost must be between {MIN_PASSWORD_HASH_COST} "
                f"and {_MAX_COST}, got {cost}"
            )
        self._cost = cost

    @property
    def cost(self) -> int:
        return self._cost

    def hash(self, password: str) -> str:
        """Hash password with a fresh random salt."""
        salt = secrets.token_bytes(_SALT_BYTES)
        derived = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt, 2**self._cost
        )
        return f"{_ALGORITHM}${self._cost}${_b64url_encode(salt)}${_b64url_encode(derived)}"

    def verify(self, password: str, stored_hash: str) -> bool:
        """Verify password against a stored hash; malformed hashes never match."""
        try:
            algo, cost_raw, salt_b64, digest_b64 = stored_hash.split("$", 3)
            if algo != _ALGORITHM:
                return False
            cost = int(cost_raw)
            if cost < 1 or cost > _MAX_COST:
                return False
            salt = _b64url_decode(salt_b64)
            expected = _b64url_decode(digest_b64)
        except (AttributeError, ValueError):
            return False
        if not salt or not expected:
            return False

        derived = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt, 2**cost, dklen=len(expected)
        )
        return hmac.compare_digest(derived, expected)

"""Keyed hashing for tamper-evident reports.

Each report gets its own key: PBKDF2-HMAC-SHA256 over the process signing
secret and a fresh random salt. The report hash is HMAC-SHA256 under that key.

The secret is read from the POSTURE_AUDIT_SECRET environment variable when not
passed explicitly. Its absence is fatal at signing time (ConfigurationError);
the verifier turns the same error into a failed VerificationResult.
"""

from __future__ import annotations

__all__ = [
    "derive_key",
    "generate_salt",
    "get_signing_secret",
    "keyed_hash",
    "short_hash",
]

import hashlib
import hmac
import os
import secrets

from posture_audit.constants import (
    DERIVED_KEY_LENGTH,
    PBKDF2_ITERATIONS,
    SALT_BYTES,
    SECRET_ENV_VAR,
    SHORT_HASH_LENGTH,
)
from posture_audit.exceptions import ConfigurationError

MISSING_SECRET_MESSAGE = (
    f"{SECRET_ENV_VAR} environment variable is required for tamper detection "
    "(signing secret required)"
)


def get_signing_secret(secret: str | None = None) -> str:
    """Return the signing secret, falling back to the environment.

    Args:
        secret: Explicit secret. Empty string counts as absent.

    Returns:
        The secret.

    Raises:
        ConfigurationError: If no secret is available.
    """
    if secret:
        return secret

    env_secret = os.environ.get(SECRET_ENV_VAR)
    if not env_secret:
        raise ConfigurationError(MISSING_SECRET_MESSAGE)
    return env_secret


def derive_key(secret: str, salt: str) -> bytes:
    """Derive a 32-byte key from secret and salt (PBKDF2-HMAC-SHA256).

    The salt is used as its UTF-8 text (the hex string), not decoded bytes,
    so keys match reports produced by other implementations of the format.
    """
    return hashlib.pbkdf2_hmac(
        "sha256",
        secret.encode("utf-8"),
        salt.encode("utf-8"),
        PBKDF2_ITERATIONS,
        dklen=DERIVED_KEY_LENGTH,
    )


def keyed_hash(content: str, salt: str, secret: str | None = None) -> str:
    """Compute HMAC-SHA256 of content under a key derived from secret + salt.

    Args:
        content: Text to hash (already canonicalized by the caller).
        salt: Per-report salt (hex string).
        secret: Signing secret. Read from the environment when None.

    Returns:
        Lowercase hex digest (64 characters).

    Raises:
        ConfigurationError: If no signing secret is available.
    """
    key = derive_key(get_signing_secret(secret), salt)
    return hmac.new(key, content.encode("utf-8"), hashlib.sha256).hexdigest()


def generate_salt() -> str:
    """Generate a fresh salt: 16 random bytes, hex-encoded."""
    return secrets.token_hex(SALT_BYTES)


def short_hash(hash_value: str) -> str:
    """First 8 characters of a hash, upper-cased, for manual comparison."""
    return hash_value[:SHORT_HASH_LENGTH].upper()

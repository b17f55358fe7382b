"""Application-wide constants for posture-audit.

Constants that define application behavior.
For user-configurable check settings, see config.py and profiles.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    # Report signing
    "SECRET_ENV_VAR",
    "SIGNATURE_ALGORITHM",
    "SIGNATURE_DELIMITER",
    "SIGNATURE_REQUIRED_FIELDS",
    "PBKDF2_ITERATIONS",
    "DERIVED_KEY_LENGTH",
    "SALT_BYTES",
    "SHORT_HASH_LENGTH",
    # Audit engine
    "DEFAULT_FACT_TIMEOUT_SECONDS",
    "FALLBACK_LATEST_MACOS_VERSION",
    "LATEST_VERSION_SENTINEL",
]

# =============================================================================
# Application Identity
# =============================================================================

APP_NAME: str = "posture-audit"

# =============================================================================
# Report Signing
# =============================================================================

# Environment variable holding the signing secret (required to sign AND verify)
SECRET_ENV_VAR: str = "POSTURE_AUDIT_SECRET"

SIGNATURE_ALGORITHM: str = "hmac-sha256"

# Appears exactly twice in a signed report, bracketing the signature JSON
SIGNATURE_DELIMITER: str = "\n--- SECURITY SIGNATURE ---\n"

SIGNATURE_REQUIRED_FIELDS: tuple[str, ...] = (
    "hash",
    "algorithm",
    "timestamp",
    "salt",
    "metadata",
)

# PBKDF2-HMAC-SHA256 parameters for per-report key derivation
PBKDF2_ITERATIONS: int = 10000
DERIVED_KEY_LENGTH: int = 32

# 16 random bytes -> 32 hex chars
SALT_BYTES: int = 16

# Hash fragment length shown to users for manual comparison
SHORT_HASH_LENGTH: int = 8

# =============================================================================
# Audit Engine
# =============================================================================

# Upper bound for a single facts-provider call
DEFAULT_FACT_TIMEOUT_SECONDS: float = 30.0

# Target version value meaning "newest known release"
LATEST_VERSION_SENTINEL: str = "latest"

# Used when a provider cannot report the newest release
FALLBACK_LATEST_MACOS_VERSION: str = "15.1"

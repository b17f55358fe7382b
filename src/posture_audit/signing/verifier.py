"""Signed report verification.

verify_signed_text() classifies signed text into exactly one state. The checks
run in a fixed order and the first one that applies wins:

    1. MALFORMED_ENVELOPE     delimiter split is not exactly 3 segments
    2. MALFORMED_JSON         signature segment is not JSON
    3. MISSING_FIELDS         hash/algorithm/timestamp/salt/metadata absent
    4. UNSUPPORTED_ALGORITHM  algorithm is not hmac-sha256
    5. MISSING_SECRET         no signing secret in this environment
    6. TAMPERED               recomputed hash differs from the stored one
    7. VALID

A hash, timestamp or salt that is not a string is also MISSING_FIELDS, but is
only looked at once the algorithm is known to be supported.

Every state except VALID is a failed verification: is_valid=False and
tampered=True. There is no partial-trust outcome. Failures are returned as
data, never raised.
"""

from __future__ import annotations

__all__ = [
    "VerificationResult",
    "VerificationState",
    "verify_signed_text",
]

import hmac
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from posture_audit.constants import SIGNATURE_ALGORITHM
from posture_audit.exceptions import ConfigurationError
from posture_audit.signing.canonical import hash_input
from posture_audit.signing.envelope import EnvelopeStatus, decode_envelope
from posture_audit.signing.keyed_hash import get_signing_secret, keyed_hash
from posture_audit.utils.logging.system_logger import get_system_logger

_STRING_FIELDS = ("hash", "timestamp", "salt")


class VerificationState(str, Enum):
    """Terminal classification of a verification."""

    MALFORMED_ENVELOPE = "malformed-envelope"
    MALFORMED_JSON = "malformed-json"
    MISSING_FIELDS = "missing-fields"
    UNSUPPORTED_ALGORITHM = "unsupported-algorithm"
    MISSING_SECRET = "missing-secret"
    TAMPERED = "tampered"
    VALID = "valid"


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of verifying one signed report.

    Attributes:
        state: Which verification state was reached.
        message: Human-readable explanation.
        original_hash: Hash stored in the signature ("" if unavailable).
        calculated_hash: Hash recomputed from content ("" if not reached).
        timestamp: Signing timestamp from the signature, if parseable.
        metadata: Signing metadata from the signature, if parseable.
    """

    state: VerificationState
    message: str
    original_hash: str = ""
    calculated_hash: str = ""
    timestamp: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.state is VerificationState.VALID

    @property
    def tampered(self) -> bool:
        """Always the negation of is_valid."""
        return not self.is_valid

    def to_dict(self) -> dict[str, Any]:
        """For logging and JSON output."""
        return {
            "is_valid": self.is_valid,
            "tampered": self.tampered,
            "state": self.state.value,
            "message": self.message,
            "original_hash": self.original_hash,
            "calculated_hash": self.calculated_hash,
            "timestamp": self.timestamp,
            "metadata": self.metadata,
        }


def _failure(state: VerificationState, message: str, **kwargs: Any) -> VerificationResult:
    result = VerificationResult(state=state, message=message, **kwargs)
    get_system_logger().info(
        {
            "event": "report_verification_failed",
            "state": state.value,
            "message": message,
        }
    )
    return result


def verify_signed_text(text: str, secret: str | None = None) -> VerificationResult:
    """Verify the integrity of a signed report.

    Args:
        text: Full signed report text (content + signature envelope).
        secret: Signing secret. Read from the environment when None.

    Returns:
        VerificationResult. Never raises for malformed or tampered input.
    """
    decoded = decode_envelope(text)

    if decoded.status is EnvelopeStatus.MISSING_ENVELOPE:
        return _failure(
            VerificationState.MALFORMED_ENVELOPE,
            "Invalid report format: signature not found or malformed",
        )

    if decoded.status is EnvelopeStatus.INVALID_JSON:
        return _failure(
            VerificationState.MALFORMED_JSON,
            "Invalid signature format: unable to parse JSON",
        )

    signature = decoded.fields
    stored_hash = signature.get("hash")
    original_hash = stored_hash if isinstance(stored_hash, str) else ""

    if decoded.status is EnvelopeStatus.MISSING_FIELDS:
        return _failure(
            VerificationState.MISSING_FIELDS,
            "Invalid signature structure: missing required fields "
            f"({', '.join(decoded.missing)})",
            original_hash=original_hash,
        )

    algorithm = signature["algorithm"]
    timestamp = signature["timestamp"]
    metadata = signature["metadata"]
    display_metadata = metadata if isinstance(metadata, dict) else {}

    if algorithm != SIGNATURE_ALGORITHM:
        return _failure(
            VerificationState.UNSUPPORTED_ALGORITHM,
            f"Unsupported algorithm: {algorithm}. Only HMAC-SHA256 is supported.",
            original_hash=original_hash,
            timestamp=timestamp if isinstance(timestamp, str) else None,
            metadata=display_metadata,
        )

    mistyped = [name for name in _STRING_FIELDS if not isinstance(signature[name], str)]
    if mistyped:
        return _failure(
            VerificationState.MISSING_FIELDS,
            "Invalid signature structure: missing required fields "
            f"({', '.join(mistyped)} must be strings)",
            original_hash=original_hash,
        )

    salt = signature["salt"]

    try:
        resolved_secret = get_signing_secret(secret)
    except ConfigurationError as e:
        return _failure(
            VerificationState.MISSING_SECRET,
            str(e),
            original_hash=original_hash,
            timestamp=timestamp,
            metadata=display_metadata,
        )

    calculated_hash = keyed_hash(
        hash_input(decoded.content, metadata, timestamp, salt),
        salt,
        resolved_secret,
    )

    if not hmac.compare_digest(calculated_hash.encode("utf-8"), original_hash.encode("utf-8")):
        return _failure(
            VerificationState.TAMPERED,
            "Report has been tampered with or corrupted",
            original_hash=original_hash,
            calculated_hash=calculated_hash,
            timestamp=timestamp,
            metadata=display_metadata,
        )

    return VerificationResult(
        state=VerificationState.VALID,
        message="Report integrity verified successfully",
        original_hash=original_hash,
        calculated_hash=calculated_hash,
        timestamp=timestamp,
        metadata=display_metadata,
    )

"""Signed report assembly.

Turns report text plus run metadata into a HashedReport and its signed text.

    signed_text, hashed = create_tamper_evident_report(content)
    ...
    result = verify_signed_text(signed_text)

Signing always strips an existing signature first, so re-signing a signed
report hashes the real content only.
"""

from __future__ import annotations

__all__ = [
    "HashedReport",
    "build_metadata",
    "create_hashed_report",
    "create_tamper_evident_report",
    "sign_report",
    "sign_text",
]

import socket
import sys
from dataclasses import dataclass, field
from typing import Any

from posture_audit import __version__
from posture_audit.audit.models import utc_timestamp
from posture_audit.constants import SIGNATURE_ALGORITHM
from posture_audit.signing.canonical import hash_input, strip_signature
from posture_audit.signing.envelope import encode_envelope
from posture_audit.signing.keyed_hash import generate_salt, keyed_hash, short_hash
from posture_audit.utils.logging.system_logger import get_system_logger


@dataclass(frozen=True, slots=True)
class HashedReport:
    """Report content with its signature fields. Created once per signing.

    Attributes:
        content: Report body, always without a signature block.
        hash: Lowercase hex HMAC-SHA256.
        algorithm: Always "hmac-sha256".
        timestamp: Signing time, ISO 8601 UTC.
        salt: Per-report salt (hex).
        metadata: platform, hostname, version and any extra fields.
    """

    content: str
    hash: str
    timestamp: str
    salt: str
    metadata: dict[str, Any] = field(default_factory=dict)
    algorithm: str = SIGNATURE_ALGORITHM

    @property
    def short_hash(self) -> str:
        return short_hash(self.hash)

    def signature_fields(self) -> dict[str, Any]:
        """Fields written into the signature envelope, in envelope order."""
        return {
            "hash": self.hash,
            "algorithm": self.algorithm,
            "timestamp": self.timestamp,
            "salt": self.salt,
            "metadata": self.metadata,
        }


def build_metadata(
    extra: dict[str, Any] | None = None,
    *,
    platform: str | None = None,
    hostname: str | None = None,
) -> dict[str, Any]:
    """Run metadata: platform, hostname and tool version, plus extra fields.

    Extra fields override the defaults.
    """
    metadata: dict[str, Any] = {
        "platform": platform or sys.platform,
        "hostname": hostname or socket.gethostname(),
        "version": __version__,
    }
    if extra:
        metadata.update(extra)
    return metadata


def create_hashed_report(
    content: str,
    metadata: dict[str, Any] | None = None,
    secret: str | None = None,
    timestamp: str | None = None,
) -> HashedReport:
    """Hash report content with a fresh salt.

    Args:
        content: Report text. Any existing signature block is stripped.
        metadata: Extra metadata merged over build_metadata() defaults.
        secret: Signing secret. Read from the environment when None.
        timestamp: Signing time. Defaults to now (UTC).

    Raises:
        ConfigurationError: If no signing secret is available.
    """
    clean_content = strip_signature(content)
    report_metadata = build_metadata(metadata)
    signed_at = timestamp or utc_timestamp()
    salt = generate_salt()

    digest = keyed_hash(hash_input(clean_content, report_metadata, signed_at, salt), salt, secret)

    return HashedReport(
        content=clean_content,
        hash=digest,
        timestamp=signed_at,
        salt=salt,
        metadata=report_metadata,
    )


def sign_report(hashed: HashedReport) -> str:
    """Render a HashedReport as signed text (content + signature envelope)."""
    return encode_envelope(hashed.content, hashed.signature_fields())


def create_tamper_evident_report(
    content: str,
    metadata: dict[str, Any] | None = None,
    secret: str | None = None,
) -> tuple[str, HashedReport]:
    """Hash and sign content in one step.

    Returns:
        (signed_text, hashed_report)
    """
    hashed = create_hashed_report(content, metadata, secret)
    get_system_logger().info(
        {
            "event": "report_signed",
            "hash": hashed.short_hash,
            "hostname": hashed.metadata.get("hostname"),
        }
    )
    return sign_report(hashed), hashed


def sign_text(content: str, metadata: dict[str, Any] | None = None, secret: str | None = None) -> str:
    """Sign content and return only the signed text."""
    signed_text, _ = create_tamper_evident_report(content, metadata, secret)
    return signed_text

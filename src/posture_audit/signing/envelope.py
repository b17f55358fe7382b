"""Signature envelope codec.

Signed report text layout (bit-exact, shared with other tools that read it):

    <content>
    --- SECURITY SIGNATURE ---
    {
      "hash": "...",
      "algorithm": "hmac-sha256",
      "timestamp": "...",
      "salt": "...",
      "metadata": {...}
    }

    --- SECURITY SIGNATURE ---

i.e. content + DELIM + json.dumps(fields, indent=2) + "\\n" + DELIM, where
DELIM is "\\n--- SECURITY SIGNATURE ---\\n". Splitting on DELIM therefore yields
exactly three segments: content, signature JSON, and an empty tail.

decode_envelope() never raises: structural problems are reported through
EnvelopeStatus so the verifier can classify them.
"""

from __future__ import annotations

__all__ = [
    "EnvelopeStatus",
    "DecodedEnvelope",
    "decode_envelope",
    "encode_envelope",
    "extract_signature",
    "missing_fields",
]

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from posture_audit.constants import SIGNATURE_DELIMITER, SIGNATURE_REQUIRED_FIELDS

_ENVELOPE_SEGMENTS = 3


class EnvelopeStatus(str, Enum):
    """Outcome of parsing signed text."""

    OK = "ok"
    MISSING_ENVELOPE = "missing_envelope"
    INVALID_JSON = "invalid_json"
    MISSING_FIELDS = "missing_fields"


@dataclass(frozen=True, slots=True)
class DecodedEnvelope:
    """Parsed signed text.

    Attributes:
        status: Parse outcome.
        content: Report body before the first delimiter ("" when not found).
        fields: Parsed signature object. Empty unless JSON parsed to an object.
        missing: Required fields that are absent or empty.
    """

    status: EnvelopeStatus
    content: str = ""
    fields: dict[str, Any] = field(default_factory=dict)
    missing: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is EnvelopeStatus.OK


def encode_envelope(content: str, fields: dict[str, Any]) -> str:
    """Append the signature block to content.

    Field order is preserved as given; the hash never covers this JSON text,
    only the canonical metadata serialization.
    """
    return content + SIGNATURE_DELIMITER + json.dumps(fields, indent=2) + "\n" + SIGNATURE_DELIMITER


def missing_fields(fields: dict[str, Any]) -> tuple[str, ...]:
    """Required signature fields that are absent or empty."""
    return tuple(name for name in SIGNATURE_REQUIRED_FIELDS if not fields.get(name))


def decode_envelope(text: str) -> DecodedEnvelope:
    """Parse signed text into content and signature fields."""
    segments = text.split(SIGNATURE_DELIMITER)
    if len(segments) != _ENVELOPE_SEGMENTS:
        return DecodedEnvelope(status=EnvelopeStatus.MISSING_ENVELOPE)

    content, signature_json, _tail = segments

    try:
        parsed = json.loads(signature_json.strip())
    except (ValueError, RecursionError):
        # JSONDecodeError, or nesting deeper than the parser can recurse
        return DecodedEnvelope(status=EnvelopeStatus.INVALID_JSON, content=content)

    # Valid JSON that is not an object cannot carry any of the fields
    if not isinstance(parsed, dict):
        return DecodedEnvelope(
            status=EnvelopeStatus.MISSING_FIELDS,
            content=content,
            missing=SIGNATURE_REQUIRED_FIELDS,
        )

    absent = missing_fields(parsed)
    if absent:
        return DecodedEnvelope(
            status=EnvelopeStatus.MISSING_FIELDS,
            content=content,
            fields=parsed,
            missing=absent,
        )

    return DecodedEnvelope(status=EnvelopeStatus.OK, content=content, fields=parsed)


def extract_signature(text: str) -> dict[str, Any] | None:
    """Return the parsed signature object, or None if text is not signed.

    Only structure is checked here: an object with missing fields is still
    returned so callers can tell "not signed" from "signed but corrupt".
    """
    decoded = decode_envelope(text)
    if decoded.status in (EnvelopeStatus.MISSING_ENVELOPE, EnvelopeStatus.INVALID_JSON):
        return None
    return decoded.fields

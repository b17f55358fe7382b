"""Tamper-evident report signing.

Keyed hashing (PBKDF2 + HMAC-SHA256), canonicalization, the signature envelope
format, and the verification state machine.
"""

from __future__ import annotations

__all__ = [
    "DecodedEnvelope",
    "EnvelopeStatus",
    "VerificationResult",
    "VerificationState",
    "canonical_metadata_json",
    "decode_envelope",
    "derive_key",
    "encode_envelope",
    "extract_signature",
    "generate_salt",
    "hash_input",
    "keyed_hash",
    "short_hash",
    "strip_signature",
    "verify_signed_text",
]

from .canonical import canonical_metadata_json, hash_input, strip_signature
from .envelope import (
    DecodedEnvelope,
    EnvelopeStatus,
    decode_envelope,
    encode_envelope,
    extract_signature,
)
from .keyed_hash import derive_key, generate_salt, keyed_hash, short_hash
from .verifier import VerificationResult, VerificationState, verify_signed_text

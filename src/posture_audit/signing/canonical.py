"""Canonical forms used as hash input.

strip_signature() guarantees hashing always covers report content only, never a
previously attached signature block. canonical_metadata_json() gives metadata a
single serialization (sorted keys, no whitespace) so that field order or
platform JSON formatting cannot change the hash.
"""

from __future__ import annotations

__all__ = [
    "canonical_metadata_json",
    "hash_input",
    "strip_signature",
]

import json
from typing import Any

from posture_audit.constants import SIGNATURE_DELIMITER


def strip_signature(text: str) -> str:
    """Return everything before the first signature delimiter.

    Text without a delimiter is returned unchanged, so
    strip_signature(strip_signature(x)) == strip_signature(x).
    """
    index = text.find(SIGNATURE_DELIMITER)
    if index == -1:
        return text
    return text[:index]


def canonical_metadata_json(metadata: dict[str, Any]) -> str:
    """Deterministic JSON for metadata (sorted keys, compact separators)."""
    return json.dumps(metadata, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def hash_input(content: str, metadata: dict[str, Any], timestamp: str, salt: str) -> str:
    """Build the exact string that is keyed-hashed when signing and verifying.

    Order: stripped content, canonical metadata JSON, timestamp, salt.
    """
    return strip_signature(content) + canonical_metadata_json(metadata) + timestamp + salt

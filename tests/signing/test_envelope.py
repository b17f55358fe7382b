"""Unit tests for the signature envelope codec."""

from __future__ import annotations

import json

from posture_audit.constants import SIGNATURE_DELIMITER
from posture_audit.signing import (
    EnvelopeStatus,
    decode_envelope,
    encode_envelope,
    extract_signature,
)

FIELDS = {
    "hash": "ab" * 32,
    "algorithm": "hmac-sha256",
    "timestamp": "2025-01-18T10:00:00.000Z",
    "salt": "cd" * 16,
    "metadata": {"platform": "darwin", "hostname": "host", "version": "1.1.0"},
}


class TestEncodeEnvelope:
    """Tests for encode_envelope."""

    def test_layout(self) -> None:
        """Signed text is content, delimiter, indented JSON, newline, delimiter."""
        # Act
        text = encode_envelope("body\n", FIELDS)

        # Assert
        assert text == "body\n" + SIGNATURE_DELIMITER + json.dumps(FIELDS, indent=2) + "\n" + SIGNATURE_DELIMITER
        assert text.endswith("\n--- SECURITY SIGNATURE ---\n")

    def test_splits_into_three_segments(self) -> None:
        assert len(encode_envelope("body", FIELDS).split(SIGNATURE_DELIMITER)) == 3


class TestDecodeEnvelope:
    """Tests for decode_envelope status classification."""

    def test_roundtrip_ok(self) -> None:
        # Act
        decoded = decode_envelope(encode_envelope("body\n", FIELDS))

        # Assert
        assert decoded.ok
        assert decoded.content == "body\n"
        assert decoded.fields == FIELDS

    def test_plain_text_is_missing_envelope(self) -> None:
        assert decode_envelope("just a report\n").status is EnvelopeStatus.MISSING_ENVELOPE

    def test_single_delimiter_is_missing_envelope(self) -> None:
        """A truncated envelope (closing delimiter cut off) is malformed."""
        text = "body" + SIGNATURE_DELIMITER + json.dumps(FIELDS)
        assert decode_envelope(text).status is EnvelopeStatus.MISSING_ENVELOPE

    def test_extra_delimiter_is_missing_envelope(self) -> None:
        """Content that itself contains the delimiter gives four segments."""
        text = "a" + SIGNATURE_DELIMITER + encode_envelope("b", FIELDS)
        assert decode_envelope(text).status is EnvelopeStatus.MISSING_ENVELOPE

    def test_unparseable_json(self) -> None:
        # Arrange
        text = "body" + SIGNATURE_DELIMITER + "{not json" + SIGNATURE_DELIMITER

        # Act
        decoded = decode_envelope(text)

        # Assert
        assert decoded.status is EnvelopeStatus.INVALID_JSON
        assert decoded.content == "body"

    def test_nesting_beyond_recursion_limit_is_invalid_json(self) -> None:
        nested = "{\"a\":" * 100_000 + "1" + "}" * 100_000
        text = "body" + SIGNATURE_DELIMITER + nested + SIGNATURE_DELIMITER

        decoded = decode_envelope(text)

        assert decoded.status is EnvelopeStatus.INVALID_JSON
        assert extract_signature(text) is None

    def test_missing_field_reported(self) -> None:
        # Arrange
        fields = {k: v for k, v in FIELDS.items() if k != "salt"}

        # Act
        decoded = decode_envelope(encode_envelope("body", fields))

        # Assert
        assert decoded.status is EnvelopeStatus.MISSING_FIELDS
        assert decoded.missing == ("salt",)

    def test_empty_field_counts_as_missing(self) -> None:
        decoded = decode_envelope(encode_envelope("body", {**FIELDS, "hash": ""}))
        assert decoded.missing == ("hash",)

    def test_non_object_json_is_missing_fields(self) -> None:
        """A JSON array or string cannot carry signature fields."""
        text = "body" + SIGNATURE_DELIMITER + "[1, 2]" + SIGNATURE_DELIMITER
        assert decode_envelope(text).status is EnvelopeStatus.MISSING_FIELDS


class TestExtractSignature:
    """Tests for extract_signature."""

    def test_returns_fields_of_signed_text(self) -> None:
        assert extract_signature(encode_envelope("body", FIELDS)) == FIELDS

    def test_none_for_plain_text(self) -> None:
        assert extract_signature("plain report") is None

    def test_none_for_invalid_json(self) -> None:
        assert extract_signature("x" + SIGNATURE_DELIMITER + "oops" + SIGNATURE_DELIMITER) is None

    def test_incomplete_signature_still_returned(self) -> None:
        """Signed-but-corrupt is distinguishable from unsigned."""
        assert extract_signature(encode_envelope("body", {"hash": "x"})) == {"hash": "x"}

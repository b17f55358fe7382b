"""Unit tests for the verification state machine.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

from typing import Any

import pytest

from posture_audit.constants import SIGNATURE_DELIMITER
from posture_audit.report.assembler import create_tamper_evident_report
from posture_audit.signing import (
    VerificationState,
    decode_envelope,
    encode_envelope,
    verify_signed_text,
)

REPORT = "macOS Security Audit Report\nOverall Status: PASSED\n"

# Nested far past the JSON decoder's recursion limit
DEEPLY_NESTED = "x" + SIGNATURE_DELIMITER + "[" * 100_000 + "]" * 100_000 + "\n" + SIGNATURE_DELIMITER


@pytest.fixture
def signed_text(signing_secret: str) -> str:
    """A report signed with the test secret."""
    text, _ = create_tamper_evident_report(REPORT, {"hostname": "MacBook-Pro", "platform": "darwin"})
    return text


def _rewrite_fields(text: str, **changes: Any) -> str:
    """Re-encode signed text with some signature fields replaced or removed."""
    decoded = decode_envelope(text)
    fields = dict(decoded.fields)
    for name, value in changes.items():
        if value is None:
            fields.pop(name, None)
        else:
            fields[name] = value
    return encode_envelope(decoded.content, fields)


class TestValid:
    """Authentic reports verify."""

    def test_fresh_signature_verifies(self, signed_text: str) -> None:
        # Act
        result = verify_signed_text(signed_text)

        # Assert
        assert result.state is VerificationState.VALID
        assert result.is_valid is True
        assert result.tampered is False
        assert result.message == "Report integrity verified successfully"
        assert result.original_hash == result.calculated_hash

    def test_metadata_exposed(self, signed_text: str) -> None:
        result = verify_signed_text(signed_text)

        assert result.metadata["hostname"] == "MacBook-Pro"
        assert result.timestamp is not None

    def test_metadata_key_order_irrelevant(self, signed_text: str) -> None:
        """Re-ordering metadata keys in the envelope JSON does not break the hash."""
        # Arrange
        metadata = decode_envelope(signed_text).fields["metadata"]
        reordered = dict(reversed(list(metadata.items())))

        # Act
        result = verify_signed_text(_rewrite_fields(signed_text, metadata=reordered))

        # Assert
        assert result.is_valid


class TestTampered:
    """Any change to content, metadata, timestamp or salt is detected."""

    def test_content_change(self, signed_text: str) -> None:
        # Arrange
        tampered = signed_text.replace("PASSED", "FAILED", 1)

        # Act
        result = verify_signed_text(tampered)

        # Assert
        assert result.state is VerificationState.TAMPERED
        assert result.message == "Report has been tampered with or corrupted"
        assert result.original_hash != result.calculated_hash

    def test_single_character_change(self, signed_text: str) -> None:
        tampered = signed_text.replace("Report", "Rep0rt", 1)
        assert verify_signed_text(tampered).state is VerificationState.TAMPERED

    def test_metadata_change(self, signed_text: str) -> None:
        # Arrange
        metadata = dict(decode_envelope(signed_text).fields["metadata"])
        metadata["hostname"] = "other-host"

        # Act
        result = verify_signed_text(_rewrite_fields(signed_text, metadata=metadata))

        # Assert
        assert result.state is VerificationState.TAMPERED

    def test_timestamp_change(self, signed_text: str) -> None:
        result = verify_signed_text(_rewrite_fields(signed_text, timestamp="2020-01-01T00:00:00.000Z"))
        assert result.state is VerificationState.TAMPERED

    def test_salt_change(self, signed_text: str) -> None:
        result = verify_signed_text(_rewrite_fields(signed_text, salt="0" * 32))
        assert result.state is VerificationState.TAMPERED

    def test_wrong_secret(self, signed_text: str) -> None:
        """Verifying with a different secret fails as tampered."""
        result = verify_signed_text(signed_text, secret="some-other-secret")
        assert result.state is VerificationState.TAMPERED


class TestMalformed:
    """Structural problems are classified before any hashing."""

    def test_unsigned_text(self, signing_secret: str) -> None:
        # Act
        result = verify_signed_text(REPORT)

        # Assert
        assert result.state is VerificationState.MALFORMED_ENVELOPE
        assert result.message == "Invalid report format: signature not found or malformed"
        assert result.tampered is True

    def test_broken_json(self, signing_secret: str) -> None:
        text = REPORT + SIGNATURE_DELIMITER + "{broken" + SIGNATURE_DELIMITER

        result = verify_signed_text(text)

        assert result.state is VerificationState.MALFORMED_JSON
        assert result.message == "Invalid signature format: unable to parse JSON"

    def test_missing_salt(self, signed_text: str) -> None:
        # Act
        result = verify_signed_text(_rewrite_fields(signed_text, salt=None))

        # Assert
        assert result.state is VerificationState.MISSING_FIELDS
        assert result.message.startswith("Invalid signature structure: missing required fields")
        assert "salt" in result.message

    def test_non_string_hash(self, signed_text: str) -> None:
        result = verify_signed_text(_rewrite_fields(signed_text, hash=12345))
        assert result.state is VerificationState.MISSING_FIELDS

    def test_unsupported_algorithm(self, signed_text: str) -> None:
        # Act
        result = verify_signed_text(_rewrite_fields(signed_text, algorithm="sha256"))

        # Assert
        assert result.state is VerificationState.UNSUPPORTED_ALGORITHM
        assert result.message == "Unsupported algorithm: sha256. Only HMAC-SHA256 is supported."


    def test_non_string_algorithm_is_unsupported(self, signed_text: str) -> None:
        """Any algorithm other than hmac-sha256 is unsupported, whatever its type."""
        # Act
        result = verify_signed_text(_rewrite_fields(signed_text, algorithm=256))

        # Assert
        assert result.state is VerificationState.UNSUPPORTED_ALGORITHM
        assert result.message == "Unsupported algorithm: 256. Only HMAC-SHA256 is supported."
        assert result.timestamp is not None

    def test_deeply_nested_signature_is_malformed_json(self, signing_secret: str) -> None:
        result = verify_signed_text(DEEPLY_NESTED)

        assert result.state is VerificationState.MALFORMED_JSON
        assert result.is_valid is False


class TestMissingSecret:
    def test_missing_secret_at_verify_time(
        self, signed_text: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without a secret verification fails with the configuration message."""
        # Arrange
        monkeypatch.delenv("POSTURE_AUDIT_SECRET")

        # Act
        result = verify_signed_text(signed_text)

        # Assert
        assert result.state is VerificationState.MISSING_SECRET
        assert "POSTURE_AUDIT_SECRET" in result.message
        assert result.is_valid is False

    def test_structure_checked_before_secret(self, no_signing_secret: None) -> None:
        """Malformed input is reported as malformed even with no secret."""
        assert verify_signed_text("plain").state is VerificationState.MALFORMED_ENVELOPE


class TestResultInvariants:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "plain",
            SIGNATURE_DELIMITER,
            SIGNATURE_DELIMITER * 2,
            "x" + SIGNATURE_DELIMITER + "null" + SIGNATURE_DELIMITER,
            "x" + SIGNATURE_DELIMITER + '"str"' + SIGNATURE_DELIMITER,
            pytest.param(DEEPLY_NESTED, id="deeply-nested"),
        ],
    )
    def test_never_raises_and_tampered_is_not_valid(self, signing_secret: str, text: str) -> None:
        result = verify_signed_text(text)

        assert result.tampered is (not result.is_valid)
        assert result.is_valid is False

    def test_to_dict(self, signed_text: str) -> None:
        data = verify_signed_text(signed_text).to_dict()

        assert data["is_valid"] is True
        assert data["tampered"] is False
        assert data["state"] == "valid"

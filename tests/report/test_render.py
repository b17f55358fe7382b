"""Unit tests for explanations, severity grouping and report rendering.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import pytest

from posture_audit.audit import CheckResult, SecurityReport
from posture_audit.report.explanations import (
    EXPLANATIONS,
    RiskLevel,
    get_explanation,
    group_failed_by_severity,
)
from posture_audit.report.render import (
    RenderContext,
    format_value,
    render_full_report,
    render_quiet_report,
    render_verification_summary,
)
from posture_audit.signing import VerificationResult, VerificationState


def _result(setting: str, passed: bool) -> CheckResult:
    return CheckResult(
        setting=setting,
        expected=True,
        actual=passed,
        passed=passed,
        message=f"{setting} is {'ok' if passed else 'not ok'}",
    )


@pytest.fixture
def failing_report() -> SecurityReport:
    """Report with high, medium, low and unknown-setting failures."""
    return SecurityReport(
        timestamp="2025-01-18T10:00:00.000Z",
        results=(
            _result("FileVault", True),
            _result("Firewall", False),
            _result("Auto-lock Timeout", False),
            _result("Firewall Stealth Mode", False),
            _result("Disk Encryption (LUKS)", False),
        ),
    )


@pytest.fixture
def context() -> RenderContext:
    return RenderContext(platform_label="macOS", system="macOS (MacBook-Pro)")


# =============================================================================
# Explanations
# =============================================================================


class TestExplanations:
    def test_known_risk_levels(self) -> None:
        assert EXPLANATIONS["FileVault"].risk_level is RiskLevel.HIGH
        assert EXPLANATIONS["Auto-lock Timeout"].risk_level is RiskLevel.MEDIUM
        assert EXPLANATIONS["Firewall Stealth Mode"].risk_level is RiskLevel.LOW
        assert EXPLANATIONS["Password Configuration"].risk_level is RiskLevel.MEDIUM

    def test_unknown_setting(self) -> None:
        assert get_explanation("Disk Encryption (LUKS)") is None

    def test_custom_table(self) -> None:
        assert get_explanation("FileVault", {}) is None


class TestGroupFailedBySeverity:
    """Tests for group_failed_by_severity."""

    def test_partitions_failed_results(self, failing_report: SecurityReport) -> None:
        # Act
        groups = group_failed_by_severity(failing_report.results)

        # Assert
        assert [r.setting for r in groups.high] == ["Firewall"]
        assert [r.setting for r in groups.medium] == ["Auto-lock Timeout"]
        assert [r.setting for r in groups.low] == ["Firewall Stealth Mode"]
        assert [r.setting for r in groups.ungrouped] == ["Disk Encryption (LUKS)"]

    def test_every_failure_lands_in_exactly_one_bucket(self, failing_report: SecurityReport) -> None:
        groups = group_failed_by_severity(failing_report.results)
        assert groups.total == len(failing_report.failed_results)

    def test_passed_results_ignored(self) -> None:
        assert group_failed_by_severity([_result("Firewall", True)]).total == 0


# =============================================================================
# Rendering
# =============================================================================


class TestFormatValue:
    def test_booleans_lowercase(self) -> None:
        assert format_value(True) == "true"
        assert format_value(False) == "false"

    def test_strings_unchanged(self) -> None:
        assert format_value("≤ 7 minutes") == "≤ 7 minutes"


class TestFullReport:
    """Tests for render_full_report."""

    def test_header_and_results(self, failing_report: SecurityReport, context: RenderContext) -> None:
        # Act
        text = render_full_report(failing_report, context)

        # Assert
        assert text.startswith("macOS Security Audit Report\n")
        assert "Generated: 2025-01-18T10:00:00.000Z" in text
        assert "System: macOS (MacBook-Pro)" in text
        assert "Overall Status: FAILED" in text
        assert "PASS FileVault [High Risk]" in text
        assert "FAIL Firewall [High Risk]" in text
        assert "   Expected: true" in text
        assert "   Actual: false" in text

    def test_priority_sections(self, failing_report: SecurityReport, context: RenderContext) -> None:
        text = render_full_report(failing_report, context)

        assert "Security Issues Found!" in text
        assert "HIGH PRIORITY: Firewall" in text
        assert "MEDIUM PRIORITY: Auto-lock Timeout" in text
        assert "LOW PRIORITY: Firewall Stealth Mode" in text
        assert "OTHER FAILED CHECKS: Disk Encryption (LUKS)" in text

    def test_unknown_setting_has_no_risk_tag(self, failing_report: SecurityReport) -> None:
        text = render_full_report(failing_report)

        assert "FAIL Disk Encryption (LUKS)\n" in text

    def test_passing_report(self, context: RenderContext) -> None:
        report = SecurityReport(timestamp="t", results=(_result("FileVault", True),))

        text = render_full_report(report, context)

        assert "Overall Status: PASSED" in text
        assert "All security checks passed!" in text
        assert "PRIORITY" not in text


class TestQuietReport:
    """Tests for render_quiet_report."""

    def test_failed_summary(self, failing_report: SecurityReport, context: RenderContext) -> None:
        # Act
        text = render_quiet_report(failing_report, context)

        # Assert
        lines = text.splitlines()
        assert lines[0] == "macOS Security Audit Summary"
        assert lines[1] == "2025-01-18T10:00:00.000Z"
        assert lines[2] == "macOS (MacBook-Pro)"
        assert lines[3] == "FAILED - 1/5 checks passed"
        assert "   HIGH (1): Firewall" in lines
        assert "   MEDIUM (1): Auto-lock Timeout" in lines
        assert "   LOW (1): Firewall Stealth Mode" in lines
        assert "   OTHER (1): Disk Encryption (LUKS)" in lines
        assert lines[-1] == "Run without --quiet for detailed recommendations"

    def test_passed_summary(self, context: RenderContext) -> None:
        report = SecurityReport(timestamp="t", results=(_result("FileVault", True),))

        text = render_quiet_report(report, context)

        assert "PASSED - 1/1 checks passed" in text
        assert "Failed Checks" not in text


class TestVerificationSummary:
    def test_valid(self) -> None:
        # Arrange
        result = VerificationResult(
            state=VerificationState.VALID,
            message="Report integrity verified successfully",
            original_hash="abcdef0123" + "0" * 54,
            calculated_hash="abcdef0123" + "0" * 54,
            timestamp="2025-01-18T10:00:00.000Z",
            metadata={"platform": "darwin", "hostname": "MacBook-Pro"},
        )

        # Act
        text = render_verification_summary(result)

        # Assert
        assert "Report integrity: VERIFIED" in text
        assert "Hash: ABCDEF01" in text
        assert "Hostname: MacBook-Pro" in text

    def test_tampered_shows_both_hashes(self) -> None:
        result = VerificationResult(
            state=VerificationState.TAMPERED,
            message="Report has been tampered with or corrupted",
            original_hash="aaaaaaaa",
            calculated_hash="bbbbbbbb",
        )

        text = render_verification_summary(result)

        assert "Report integrity: FAILED" in text
        assert "Original hash: AAAAAAAA" in text
        assert "Calculated hash: BBBBBBBB" in text

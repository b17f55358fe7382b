"""Human-readable renderings of audit reports and verification results.

- render_full_report: every check with expected/actual/status, explanations
  and failed checks listed by priority
- render_quiet_report: one status line plus failed checks grouped by severity
- render_verification_summary: verification outcome with hash fragments
"""

from __future__ import annotations

__all__ = [
    "RenderContext",
    "format_value",
    "render_full_report",
    "render_quiet_report",
    "render_verification_summary",
]

from collections.abc import Mapping
from dataclasses import dataclass

from posture_audit.audit.models import CheckResult, CheckValue, SecurityReport
from posture_audit.report.explanations import (
    Explanation,
    SeverityGroups,
    get_explanation,
    group_failed_by_severity,
)
from posture_audit.signing.keyed_hash import short_hash
from posture_audit.signing.verifier import VerificationResult

_RULE_WIDTH = 60
_SUMMARY_RULE_WIDTH = 50


@dataclass(frozen=True, slots=True)
class RenderContext:
    """What the renderers need besides the report itself.

    Attributes:
        platform_label: e.g. "macOS", "Linux".
        system: One-line system description (e.g. "macOS 15.1 (MacBook-Pro)").
        explanations: Setting explanations. None uses the built-in table.
    """

    platform_label: str = "System"
    system: str = "Unknown"
    explanations: Mapping[str, Explanation] | None = None


def format_value(value: CheckValue) -> str:
    """Format an expected/actual value (booleans as true/false)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _names(results: list[CheckResult]) -> str:
    return ", ".join(result.setting for result in results)


def _render_result(result: CheckResult, context: RenderContext) -> list[str]:
    explanation = get_explanation(result.setting, context.explanations)
    status = "PASS" if result.passed else "FAIL"
    header = f"{status} {result.setting}"
    if explanation:
        header += f" [{explanation.risk_level.value} Risk]"

    lines = [
        "",
        header,
        f"   Expected: {format_value(result.expected)}",
        f"   Actual: {format_value(result.actual)}",
        f"   Status: {result.message}",
    ]
    if explanation:
        lines.append(f"   What it does: {explanation.description}")
        lines.append(f"   Security advice: {explanation.recommendation}")
    return lines


def _render_priorities(groups: SeverityGroups) -> list[str]:
    lines = []
    labels = ("HIGH PRIORITY", "MEDIUM PRIORITY", "LOW PRIORITY")
    for label, (_level, results) in zip(labels, groups.by_level()):
        if results:
            lines.append(f"{label}: {_names(results)}")
    if groups.ungrouped:
        lines.append(f"OTHER FAILED CHECKS: {_names(groups.ungrouped)}")
    return lines


def render_full_report(report: SecurityReport, context: RenderContext | None = None) -> str:
    """Render the detailed report text (the content that gets signed)."""
    context = context or RenderContext()
    lines = [
        f"{context.platform_label} Security Audit Report",
        f"Generated: {report.timestamp}",
        f"System: {context.system}",
        f"Overall Status: {'PASSED' if report.overall_passed else 'FAILED'}",
        "",
        "Security Check Results:",
        "=" * _RULE_WIDTH,
    ]

    for result in report.results:
        lines.extend(_render_result(result, context))

    lines.append("")
    if report.overall_passed:
        lines.append("All security checks passed!")
        lines.append("Your system meets the specified security requirements.")
    else:
        lines.append("Security Issues Found!")
        lines.append("The checks marked as FAIL indicate potential security vulnerabilities.")
        lines.append("Review the security advice above and adjust your system settings accordingly.")
        lines.append("")
        lines.extend(_render_priorities(group_failed_by_severity(report.results, context.explanations)))

    return "\n".join(lines) + "\n"


def render_quiet_report(report: SecurityReport, context: RenderContext | None = None) -> str:
    """Render the condensed summary.

    Example:
        macOS Security Audit Summary
        2025-01-18T10:00:00.000Z
        macOS 15.1
        FAILED - 7/9 checks passed

        Failed Checks:
           HIGH (1): Firewall
           MEDIUM (1): Auto-lock Timeout
    """
    context = context or RenderContext()
    status = "PASSED" if report.overall_passed else "FAILED"
    lines = [
        f"{context.platform_label} Security Audit Summary",
        report.timestamp,
        context.system,
        f"{status} - {report.passed_count}/{len(report.results)} checks passed",
    ]

    if not report.overall_passed:
        groups = group_failed_by_severity(report.results, context.explanations)
        lines.append("")
        lines.append("Failed Checks:")
        for level, results in groups.by_level():
            if results:
                lines.append(f"   {level.value.upper()} ({len(results)}): {_names(results)}")
        if groups.ungrouped:
            lines.append(f"   OTHER ({len(groups.ungrouped)}): {_names(groups.ungrouped)}")
        lines.append("")
        lines.append("Run without --quiet for detailed recommendations")

    return "\n".join(lines) + "\n"


def render_verification_summary(result: VerificationResult) -> str:
    """Render a verification outcome with short hash fragments for manual comparison."""
    lines = ["Report Verification", "=" * _SUMMARY_RULE_WIDTH]

    if result.is_valid:
        lines.append("Report integrity: VERIFIED")
        lines.append(f"Hash: {short_hash(result.original_hash)}")
    else:
        lines.append("Report integrity: FAILED")
        lines.append(result.message)
        if result.original_hash:
            lines.append(f"Original hash: {short_hash(result.original_hash)}")
        if result.calculated_hash:
            lines.append(f"Calculated hash: {short_hash(result.calculated_hash)}")

    if result.timestamp:
        lines.append(f"Generated: {result.timestamp}")
    for key in ("platform", "hostname", "version"):
        if key in result.metadata:
            lines.append(f"{key.capitalize()}: {result.metadata[key]}")

    lines.append("=" * _SUMMARY_RULE_WIDTH)
    return "\n".join(lines) + "\n"

"""Audit result models and the overall-status reduction.

Usage:
    report = reduce_results(results)
    if not report.overall_passed:
        for result in report.failed_results:
            print(result.setting, result.message)
"""

from __future__ import annotations

__all__ = [
    "CheckResult",
    "CheckValue",
    "SecurityReport",
    "reduce_results",
    "utc_timestamp",
]

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

# expected/actual are heterogeneous: a bool for on/off settings, a string for
# thresholds ("≤ 7 minutes") and versions
CheckValue = bool | int | str


def utc_timestamp() -> str:
    """Current time as ISO 8601 UTC with milliseconds, e.g. 2025-01-18T10:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one named security setting comparison."""

    setting: str
    expected: CheckValue
    actual: CheckValue
    passed: bool
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "setting": self.setting,
            "expected": self.expected,
            "actual": self.actual,
            "passed": self.passed,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class SecurityReport:
    """All check results of one audit run.

    overall_passed is derived from results, so it can never disagree with
    them. An empty report passes.
    """

    timestamp: str
    results: tuple[CheckResult, ...] = ()

    @property
    def overall_passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def passed_count(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def failed_results(self) -> list[CheckResult]:
        return [result for result in self.results if not result.passed]

    def to_dict(self) -> dict[str, Any]:
        """For logging/JSON output."""
        return {
            "timestamp": self.timestamp,
            "overall_passed": self.overall_passed,
            "results": [result.to_dict() for result in self.results],
        }

    def __str__(self) -> str:
        status = "PASSED" if self.overall_passed else "FAILED"
        lines = [f"Security Audit: {status} ({self.passed_count}/{len(self.results)} checks passed)"]
        for result in self.failed_results:
            lines.append(f"  - {result.setting}: {result.message}")
        return "\n".join(lines)


def reduce_results(results: Iterable[CheckResult], timestamp: str | None = None) -> SecurityReport:
    """Collect check results into a SecurityReport.

    Args:
        results: Check results in report order.
        timestamp: Report timestamp. Defaults to now (UTC).
    """
    return SecurityReport(timestamp=timestamp or utc_timestamp(), results=tuple(results))

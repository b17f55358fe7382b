"""Concurrent audit engine.

Runs every configured check against a facts provider and reduces the results
into a SecurityReport.

Design:
- A check runs only if its config section is present AND the provider lists
  its category in supported_categories. Anything else is skipped, not failed.
- Checks fan out with asyncio.gather and share no state; each returns its own
  list of results. Results keep config order whatever the completion order.
- Isolation: an exception or timeout in one check becomes a single failing
  CheckResult for that section. Other checks are unaffected.
"""

from __future__ import annotations

__all__ = [
    "AuditEngine",
    "audit_security",
]

import asyncio

from posture_audit.audit.checks import CHECKS, CheckDefinition, setting_name
from posture_audit.audit.facts import FactsProvider
from posture_audit.audit.models import CheckResult, SecurityReport, reduce_results
from posture_audit.config import SecurityConfig
from posture_audit.constants import DEFAULT_FACT_TIMEOUT_SECONDS
from posture_audit.utils.logging.system_logger import get_system_logger


class AuditEngine:
    """Evaluates a SecurityConfig against one facts provider.

    Args:
        provider: Platform facts provider.
        fact_timeout_seconds: Upper bound for each check's provider call.
            None disables the timeout.
    """

    def __init__(
        self,
        provider: FactsProvider,
        fact_timeout_seconds: float | None = DEFAULT_FACT_TIMEOUT_SECONDS,
    ) -> None:
        self._provider = provider
        self._timeout = fact_timeout_seconds

    def planned_checks(self, config: SecurityConfig) -> list[CheckDefinition]:
        """Checks that will run for this config, in report order."""
        supported = self._provider.supported_categories
        planned = []
        for check in CHECKS:
            if getattr(config, check.section) is None:
                continue
            if check.category not in supported:
                get_system_logger().info(
                    {
                        "event": "check_skipped",
                        "section": check.section,
                        "platform": self._provider.platform.value,
                        "message": f"{check.section} is not supported on {self._provider.platform.value}",
                    }
                )
                continue
            planned.append(check)
        return planned

    async def run(self, config: SecurityConfig) -> SecurityReport:
        """Run all planned checks concurrently and reduce the results."""
        planned = self.planned_checks(config)
        outcomes = await asyncio.gather(
            *(self._run_check(check, config) for check in planned),
            return_exceptions=True,
        )

        results: list[CheckResult] = []
        for check, outcome in zip(planned, outcomes):
            if isinstance(outcome, BaseException):
                results.append(self._failure_result(check, outcome))
            else:
                results.extend(outcome)

        report = reduce_results(results)
        get_system_logger().info(
            {
                "event": "audit_completed",
                "overall_passed": report.overall_passed,
                "checks": len(report.results),
                "failed": len(report.failed_results),
            }
        )
        return report

    async def _run_check(self, check: CheckDefinition, config: SecurityConfig) -> list[CheckResult]:
        section_config = getattr(config, check.section)
        try:
            if self._timeout is None:
                return await check.run(section_config, self._provider)
            return await asyncio.wait_for(check.run(section_config, self._provider), self._timeout)
        except Exception as e:
            return [self._failure_result(check, e)]

    def _failure_result(self, check: CheckDefinition, error: BaseException) -> CheckResult:
        setting = setting_name(check.section, self._provider.platform)
        if isinstance(error, TimeoutError):
            detail = f"timed out after {self._timeout} seconds"
        else:
            detail = f"{type(error).__name__}: {error}"

        get_system_logger().warning(
            {
                "event": "check_failed",
                "section": check.section,
                "setting": setting,
                "error": detail,
                "message": f"Unable to evaluate {setting}: {detail}",
            }
        )
        return CheckResult(
            setting=setting,
            expected="Check completes",
            actual="Error",
            passed=False,
            message=f"Unable to evaluate {setting}: {detail}",
        )


async def audit_security(
    config: SecurityConfig,
    provider: FactsProvider,
    fact_timeout_seconds: float | None = DEFAULT_FACT_TIMEOUT_SECONDS,
) -> SecurityReport:
    """Audit config against provider facts. See AuditEngine."""
    return await AuditEngine(provider, fact_timeout_seconds).run(config)

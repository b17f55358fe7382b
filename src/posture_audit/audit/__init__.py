"""Security posture audit: facts-provider protocol, checks, engine, results."""

from __future__ import annotations

__all__ = [
    "AuditEngine",
    "CheckResult",
    "FactCategory",
    "FactsProvider",
    "Platform",
    "SecurityReport",
    "StaticFactsProvider",
    "audit_security",
    "compare_versions",
    "reduce_results",
]

from .engine import AuditEngine, audit_security
from .facts import FactCategory, FactsProvider, Platform
from .models import CheckResult, SecurityReport, reduce_results
from .static_provider import StaticFactsProvider
from .versions import compare_versions

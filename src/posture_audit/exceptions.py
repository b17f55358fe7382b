"""Custom exceptions for posture-audit.

This module contains all custom exceptions used throughout the package.
Exceptions are organized into two categories:

Recoverable Errors (audit continues, failure recorded as data):
    - CheckExecutionError: A facts-provider call failed for one check

Fatal Failures (command must stop):
    - PostureAuditError: Base for unrecoverable failures
    - ConfigurationError: Signing secret missing or configuration invalid

Verification failures are NOT exceptions. Tampered or malformed reports are
returned as VerificationResult values so callers can branch on them.

Usage:
    from posture_audit.exceptions import ConfigurationError
"""

from __future__ import annotations

__all__ = [
    "CheckExecutionError",
    "ConfigurationError",
    "PostureAuditError",
]


# =============================================================================
# Recoverable Errors (caught per check, downgraded to a failing result)
# =============================================================================


class CheckExecutionError(Exception):
    """Raised when a single security check cannot be evaluated.

    The audit engine catches this (and any other exception from a facts
    provider) per check and records a failing CheckResult instead.

    Attributes:
        setting: Name of the setting whose check failed.
    """

    def __init__(self, setting: str, message: str) -> None:
        super().__init__(message)
        self.setting = setting


# =============================================================================
# Fatal Failures (command exits)
# =============================================================================


class PostureAuditError(Exception):
    """Base class for failures the CLI cannot recover from.

    Attributes:
        exit_code: Process exit code.
        failure_type: Category string for the system log.
    """

    exit_code: int = 1
    failure_type: str = "unknown"


class ConfigurationError(PostureAuditError):
    """Raised when configuration required for operation is missing or invalid.

    Examples:
        - Signing secret environment variable not set (sign AND verify)
        - Configuration file fails validation
        - Unknown profile name
    """

    # Any error exits 1, same as a failed audit
    exit_code = 1
    failure_type = "configuration_failure"

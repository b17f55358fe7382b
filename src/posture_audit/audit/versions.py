"""Dotted version comparison for the OS version check."""

from __future__ import annotations

__all__ = [
    "compare_versions",
    "is_latest_sentinel",
    "parse_version",
    "resolve_target_version",
]

import re

from posture_audit.constants import LATEST_VERSION_SENTINEL

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


def parse_version(version: str) -> list[int]:
    """Split "15.1.2" into [15, 1, 2]. Non-numeric components count as 0."""
    parts = []
    for component in version.split("."):
        match = _LEADING_DIGITS.match(component)
        parts.append(int(match.group(1)) if match else 0)
    return parts


def compare_versions(current: str, target: str) -> int:
    """Compare dotted versions numerically.

    Shorter versions are padded with zeros, so "15" == "15.0.0".

    Returns:
        1 if current > target, -1 if current < target, 0 if equal.
    """
    current_parts = parse_version(current)
    target_parts = parse_version(target)

    length = max(len(current_parts), len(target_parts))
    current_parts += [0] * (length - len(current_parts))
    target_parts += [0] * (length - len(target_parts))

    for current_part, target_part in zip(current_parts, target_parts):
        if current_part > target_part:
            return 1
        if current_part < target_part:
            return -1
    return 0


def is_latest_sentinel(target: str) -> bool:
    return target.strip().lower() == LATEST_VERSION_SENTINEL


def resolve_target_version(
    target: str, latest_known: str | None, fallback: str | None = None
) -> str | None:
    """Replace the "latest" sentinel with the newest known release.

    Args:
        target: Configured target version or "latest".
        latest_known: Newest release reported by the facts provider, if any.
        fallback: Release to assume when the provider reports none.

    Returns:
        The version to compare against, or None when "latest" cannot be
        resolved.
    """
    if not is_latest_sentinel(target):
        return target
    return latest_known or fallback

"""Security setting explanations and severity grouping.

Explanations are keyed by CheckResult.setting. Settings without an entry
(e.g. the Linux-specific names) are never dropped from severity grouping:
they land in the ``ungrouped`` bucket.
"""

from __future__ import annotations

__all__ = [
    "EXPLANATIONS",
    "Explanation",
    "RiskLevel",
    "SeverityGroups",
    "get_explanation",
    "group_failed_by_severity",
]

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from posture_audit.audit.models import CheckResult


class RiskLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True, slots=True)
class Explanation:
    description: str
    recommendation: str
    risk_level: RiskLevel


EXPLANATIONS: dict[str, Explanation] = {
    "FileVault": Explanation(
        "FileVault provides full-disk encryption, protecting your data if your Mac is lost or stolen.",
        "Should be ENABLED. Without FileVault, anyone with physical access can read your files "
        "by booting from external media.",
        RiskLevel.HIGH,
    ),
    "Password Configuration": Explanation(
        "Limits how long a login password stays in use, so a leaked or guessed password "
        "stops working after a while.",
        "Should be ENFORCED with a maximum age (180 days is common). Change the password "
        "when it exceeds the limit.",
        RiskLevel.MEDIUM,
    ),
    "Password Protection": Explanation(
        "Requires a password to log into your Mac, preventing unauthorized access.",
        "Should be ENABLED. Password protection is the first line of defense against "
        "unauthorized access.",
        RiskLevel.HIGH,
    ),
    "Immediate Password Requirement": Explanation(
        "Requires password entry when waking from screen saver or sleep, preventing "
        "unauthorized access.",
        "Should be ENABLED. Any password requirement after lock provides security protection; "
        'for maximum security, set to "immediately".',
        RiskLevel.MEDIUM,
    ),
    "Auto-lock Timeout": Explanation(
        "Automatically locks your screen after a period of inactivity to prevent "
        "unauthorized access.",
        "Should be ≤7 minutes for security, ≤15 minutes for convenience. Shorter timeouts "
        "provide better security.",
        RiskLevel.MEDIUM,
    ),
    "Firewall": Explanation(
        "Application firewall blocks unauthorized network connections and protects against "
        "network-based attacks.",
        "Should be ENABLED. Protects against malicious network traffic and unauthorized remote "
        "access attempts.",
        RiskLevel.HIGH,
    ),
    "Firewall Stealth Mode": Explanation(
        "Makes your Mac invisible to network scans and ping requests, reducing attack surface.",
        "Should be ENABLED for maximum security. Makes your Mac harder to discover on networks.",
        RiskLevel.LOW,
    ),
    "Gatekeeper": Explanation(
        "Verifies downloaded applications are from identified developers and haven't been "
        "tampered with.",
        "Should be ENABLED. Prevents execution of malicious or unsigned software that could "
        "compromise your system.",
        RiskLevel.HIGH,
    ),
    "System Integrity Protection": Explanation(
        "SIP protects critical system files and processes from modification, even by users "
        "with admin privileges.",
        "Should be ENABLED. Prevents malware and accidental modifications from corrupting "
        "macOS system files.",
        RiskLevel.HIGH,
    ),
    "Remote Login (SSH)": Explanation(
        "SSH allows remote command-line access to your Mac over the network.",
        "Should be DISABLED unless specifically needed. SSH access can be exploited if not "
        "properly secured.",
        RiskLevel.MEDIUM,
    ),
    "Remote Management": Explanation(
        "Allows remote control and management of your Mac through Apple Remote Desktop or "
        "similar tools.",
        "Should be DISABLED unless required for IT management. Provides extensive remote "
        "access capabilities.",
        RiskLevel.MEDIUM,
    ),
    "Automatic Updates": Explanation(
        "Automatically checks for, downloads, and/or installs software updates.",
        "Should be ENABLED with at least automatic security updates.",
        RiskLevel.HIGH,
    ),
    "Automatic Update Mode": Explanation(
        "Determines the level of automation for software updates: disabled, check-only, "
        "download-only, or fully-automatic.",
        'At minimum use "download-only" mode, or "fully-automatic" for maximum security. '
        'Avoid "disabled" and "check-only" modes.',
        RiskLevel.HIGH,
    ),
    "Security Updates": Explanation(
        "Automatically installs critical security updates without user intervention.",
        "Should be ENABLED. Critical security patches should be installed immediately to "
        "prevent exploitation of known vulnerabilities.",
        RiskLevel.HIGH,
    ),
    "File Sharing": Explanation(
        "Allows other devices on the network to access shared folders on your Mac.",
        "Should be DISABLED unless actively sharing files. File sharing expands your attack "
        "surface.",
        RiskLevel.MEDIUM,
    ),
    "Screen Sharing": Explanation(
        "Allows remote users to view and control your Mac's screen over the network.",
        "Should be DISABLED unless required for remote support. Provides full remote access "
        "to your desktop.",
        RiskLevel.HIGH,
    ),
    "Remote Login Sharing": Explanation(
        "Allows remote shell access to your Mac through the Sharing preferences.",
        "Should be DISABLED unless you need SSH access. Remote login exposes an "
        "authentication surface to the network.",
        RiskLevel.MEDIUM,
    ),
    "OS Version": Explanation(
        "Ensures your OS is up-to-date with the latest security patches and features.",
        "Should be current or recent version. Newer versions include important security fixes.",
        RiskLevel.MEDIUM,
    ),
    "WiFi Network Security": Explanation(
        "Monitors current WiFi network connection to ensure you are not connected to banned "
        "or insecure networks.",
        "Avoid connecting to untrusted, guest, or prohibited networks for work purposes.",
        RiskLevel.MEDIUM,
    ),
    "Installed Applications": Explanation(
        "Monitors installed third-party applications to ensure no banned or prohibited "
        "software is installed on the system.",
        "Remove any banned applications and only install approved software from trusted "
        "sources.",
        RiskLevel.MEDIUM,
    ),
}


def get_explanation(
    setting: str, explanations: Mapping[str, Explanation] | None = None
) -> Explanation | None:
    table = EXPLANATIONS if explanations is None else explanations
    return table.get(setting)


@dataclass(frozen=True, slots=True)
class SeverityGroups:
    """Failed checks partitioned by risk level."""

    high: list[CheckResult] = field(default_factory=list)
    medium: list[CheckResult] = field(default_factory=list)
    low: list[CheckResult] = field(default_factory=list)
    ungrouped: list[CheckResult] = field(default_factory=list)

    def by_level(self) -> list[tuple[RiskLevel, list[CheckResult]]]:
        return [
            (RiskLevel.HIGH, self.high),
            (RiskLevel.MEDIUM, self.medium),
            (RiskLevel.LOW, self.low),
        ]

    @property
    def total(self) -> int:
        return len(self.high) + len(self.medium) + len(self.low) + len(self.ungrouped)


def group_failed_by_severity(
    results: Iterable[CheckResult],
    explanations: Mapping[str, Explanation] | None = None,
) -> SeverityGroups:
    """Partition the failed results into High/Medium/Low/ungrouped.

    Passed results are ignored. Report order is kept within each bucket.
    """
    groups = SeverityGroups()
    buckets = {
        RiskLevel.HIGH: groups.high,
        RiskLevel.MEDIUM: groups.medium,
        RiskLevel.LOW: groups.low,
    }
    for result in results:
        if result.passed:
            continue
        explanation = get_explanation(result.setting, explanations)
        if explanation is None:
            groups.ungrouped.append(result)
        else:
            buckets[explanation.risk_level].append(result)
    return groups

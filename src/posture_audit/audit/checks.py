"""Per-category security checks.

Each check takes the configured section and a facts provider, awaits one
provider getter, and returns the CheckResults for that section. Most sections
produce one result; password protection, firewall, automatic updates and
sharing services can produce several.

Comparison rules:
- on/off settings: strict equality with the configured value
- auto-lock: passes only when 0 < actual <= max (0 means disabled)
- password policy: fails only when the password is older than max_age_days
- OS version: numeric dotted comparison, current >= target
- banned lists: case-insensitive substring match in either direction

CHECKS maps each SecurityConfig section to its check, in report order.
"""

from __future__ import annotations

__all__ = [
    "CHECKS",
    "CheckDefinition",
    "find_banned",
    "password_requirements_text",
    "setting_name",
    "update_mode_description",
]

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from posture_audit.audit.facts import (
    PLATFORM_LABELS,
    FactCategory,
    FactsProvider,
    LinuxUpdateFacts,
    MacUpdateFacts,
    Platform,
    UpdateFacts,
    UpdateMode,
)
from posture_audit.audit.models import CheckResult
from posture_audit.audit.versions import (
    compare_versions,
    is_latest_sentinel,
    resolve_target_version,
)
from posture_audit.config import (
    AutoLockConfig,
    AutomaticUpdatesConfig,
    EnabledSetting,
    FirewallConfig,
    InstalledAppsConfig,
    OSVersionConfig,
    PasswordPolicyConfig,
    PasswordProtectionConfig,
    SharingServicesConfig,
    WifiSecurityConfig,
)
from posture_audit.constants import FALLBACK_LATEST_MACOS_VERSION
from posture_audit.exceptions import CheckExecutionError

CheckFunction = Callable[[Any, FactsProvider], Awaitable[list[CheckResult]]]

# Platform-specific display names. Explanation lookups are keyed on these.
_SETTING_NAMES: dict[str, dict[Platform, str]] = {
    "disk_encryption": {
        Platform.MACOS: "FileVault",
        Platform.LINUX: "Disk Encryption (LUKS)",
        Platform.WINDOWS: "Disk Encryption (BitLocker)",
    },
    "package_verification": {
        Platform.MACOS: "Gatekeeper",
        Platform.LINUX: "Package Verification",
        Platform.WINDOWS: "Package Verification",
    },
    "system_integrity_protection": {
        Platform.MACOS: "System Integrity Protection",
        Platform.LINUX: "System Integrity Protection (SELinux/AppArmor)",
        Platform.WINDOWS: "System Integrity Protection",
    },
}

_FIXED_SETTING_NAMES: dict[str, str] = {
    "password_policy": "Password Configuration",
    "password_protection": "Password Protection",
    "auto_lock": "Auto-lock Timeout",
    "firewall": "Firewall",
    "remote_login": "Remote Login (SSH)",
    "remote_management": "Remote Management",
    "automatic_updates": "Automatic Updates",
    "sharing_services": "Sharing Services",
    "os_version": "OS Version",
    "wifi_security": "WiFi Network Security",
    "installed_apps": "Installed Applications",
}

_UPDATE_MODE_DESCRIPTIONS: dict[str, str] = {
    UpdateMode.DISABLED.value: "no automatic checking, downloading, or installing",
    UpdateMode.CHECK_ONLY.value: "automatic checking enabled, but manual download and install required",
    UpdateMode.DOWNLOAD_ONLY.value: "automatic checking and downloading, but manual install required",
    UpdateMode.FULLY_AUTOMATIC.value: "automatic checking, downloading, and installing",
}


def setting_name(section: str, platform: Platform) -> str:
    """Display name of a section's primary result on the given platform."""
    if section in _SETTING_NAMES:
        return _SETTING_NAMES[section][platform]
    return _FIXED_SETTING_NAMES[section]


def update_mode_description(mode: str) -> str:
    return _UPDATE_MODE_DESCRIPTIONS.get(mode, "unknown update mode")


def find_banned(items: Iterable[str], banned: Iterable[str]) -> list[str]:
    """Items matching any banned name (case-insensitive substring, either direction).

    Banned "VPN" matches "OpenVPN Connect" and banned "EAIguest" matches
    "Guest". Empty strings never match.
    """
    banned_lower = [name.lower() for name in banned if name]
    found = []
    for item in items:
        item_lower = item.lower()
        if not item_lower:
            continue
        if any(b in item_lower or item_lower in b for b in banned_lower):
            found.append(item)
    return found


def _on_off(setting: str, expected: bool, actual: bool, enabled_msg: str, disabled_msg: str) -> CheckResult:
    return CheckResult(
        setting=setting,
        expected=expected,
        actual=actual,
        passed=actual is expected,
        message=enabled_msg if actual else disabled_msg,
    )


# =============================================================================
# Checks
# =============================================================================


async def check_disk_encryption(config: EnabledSetting, provider: FactsProvider) -> list[CheckResult]:
    actual = await provider.disk_encryption()
    if provider.platform is Platform.MACOS:
        enabled_msg = "FileVault is enabled - disk encryption is active"
        disabled_msg = "FileVault is disabled - disk is not encrypted"
    else:
        enabled_msg = "Disk encryption is enabled - encryption is active"
        disabled_msg = "Disk encryption is disabled - disk is not encrypted"
    return [
        _on_off(
            setting_name("disk_encryption", provider.platform),
            config.enabled,
            actual,
            enabled_msg,
            disabled_msg,
        )
    ]


def password_requirements_text(config: PasswordPolicyConfig) -> str:
    """Describe the complexity rules, e.g. "8+ characters with uppercase, number"."""
    parts = []
    if config.min_length > 0:
        parts.append(f"{config.min_length}+ characters")

    char_types = [
        name
        for name, required in (
            ("uppercase", config.require_uppercase),
            ("lowercase", config.require_lowercase),
            ("number", config.require_number),
            ("special character", config.require_special_char),
        )
        if required
    ]
    if char_types:
        parts.append(f"with {', '.join(char_types)}")
    elif config.min_length > 0:
        parts.append("(any characters allowed)")
    return " ".join(parts)


async def check_password_policy(
    config: PasswordPolicyConfig, provider: FactsProvider
) -> list[CheckResult]:
    """Password age against max_age_days.

    A policy that is not required passes without querying the provider. An
    age the provider cannot determine is treated as compliant.
    """
    if not config.required:
        return [
            CheckResult(
                setting="Password Configuration",
                expected="Required: No",
                actual="Configuration loaded",
                passed=True,
                message="Password validation is disabled",
            )
        ]

    requirements = password_requirements_text(config)
    max_age = config.max_age_days
    expected = f"Required: Yes, Requirements: {requirements}, Max Age: {max_age} days"
    enabled = f"Password validation is enabled with {requirements} and {max_age}-day expiration"

    age = await provider.password_age_days()
    if age is None:
        passed = True
        message = f"{enabled} (password age could not be determined - assuming compliant)"
    elif age > max_age:
        passed = False
        message = f"Expiration: Password is {age} days old (maximum allowed: {max_age} days)"
    else:
        passed = True
        message = f"{enabled} (password is {age} days old)"

    return [
        CheckResult(
            setting="Password Configuration",
            expected=expected,
            actual="Configuration loaded" if passed else "Validation failed",
            passed=passed,
            message=message,
        )
    ]


async def check_password_protection(
    config: PasswordProtectionConfig, provider: FactsProvider
) -> list[CheckResult]:
    facts = await provider.password_protection()
    results = [
        _on_off(
            "Password Protection",
            config.enabled,
            facts.enabled,
            "Password protection is enabled",
            "Password protection is disabled",
        )
    ]
    if config.require_password_immediately is not None:
        results.append(
            _on_off(
                "Immediate Password Requirement",
                config.require_password_immediately,
                facts.require_password_immediately,
                "Password is required immediately after screen saver",
                "Password is not required immediately after screen saver",
            )
        )
    return results


async def check_auto_lock(config: AutoLockConfig, provider: FactsProvider) -> list[CheckResult]:
    actual = await provider.auto_lock_timeout()
    limit = config.max_timeout_minutes
    passed = 0 < actual <= limit

    if passed:
        message = f"Screen locks after {actual} minutes (within acceptable limit)"
    elif actual == 0:
        message = "Auto-lock is disabled"
    else:
        message = f"Screen locks after {actual} minutes (exceeds {limit} minute limit)"

    return [
        CheckResult(
            setting="Auto-lock Timeout",
            expected=f"≤ {limit} minutes",
            actual=f"{actual} minutes",
            passed=passed,
            message=message,
        )
    ]


async def check_firewall(config: FirewallConfig, provider: FactsProvider) -> list[CheckResult]:
    facts = await provider.firewall()
    stealth_note = " (stealth mode active)" if facts.stealth_mode else ""
    results = [
        _on_off(
            "Firewall",
            config.enabled,
            facts.enabled,
            f"Firewall is enabled{stealth_note}",
            "Firewall is disabled - system is vulnerable to network attacks",
        )
    ]
    if config.stealth_mode is not None:
        results.append(
            _on_off(
                "Firewall Stealth Mode",
                config.stealth_mode,
                facts.stealth_mode,
                "Firewall stealth mode is enabled - system is less visible to network scans",
                "Firewall stealth mode is disabled",
            )
        )
    return results


async def check_package_verification(
    config: EnabledSetting, provider: FactsProvider
) -> list[CheckResult]:
    actual = await provider.package_verification()
    if provider.platform is Platform.MACOS:
        enabled_msg = "Gatekeeper is enabled - unsigned applications are blocked"
        disabled_msg = "Gatekeeper is disabled - unsigned applications can run"
    else:
        enabled_msg = "Package verification is enabled - unsigned packages are blocked"
        disabled_msg = "Package verification is disabled - unsigned packages can be installed"
    return [
        _on_off(
            setting_name("package_verification", provider.platform),
            config.enabled,
            actual,
            enabled_msg,
            disabled_msg,
        )
    ]


async def check_system_integrity(config: EnabledSetting, provider: FactsProvider) -> list[CheckResult]:
    actual = await provider.system_integrity_protection()
    if provider.platform is Platform.MACOS:
        enabled_msg = "SIP is enabled - system files are protected"
        disabled_msg = "SIP is disabled - system files are vulnerable"
    else:
        enabled_msg = "System integrity protection is enabled"
        disabled_msg = "System integrity protection is disabled"
    return [
        _on_off(
            setting_name("system_integrity_protection", provider.platform),
            config.enabled,
            actual,
            enabled_msg,
            disabled_msg,
        )
    ]


async def check_remote_login(config: EnabledSetting, provider: FactsProvider) -> list[CheckResult]:
    actual = await provider.remote_login()
    return [
        _on_off(
            "Remote Login (SSH)",
            config.enabled,
            actual,
            "Remote login is enabled - SSH access is available",
            "Remote login is disabled",
        )
    ]


async def check_remote_management(config: EnabledSetting, provider: FactsProvider) -> list[CheckResult]:
    actual = await provider.remote_management()
    return [
        _on_off(
            "Remote Management",
            config.enabled,
            actual,
            "Remote management is enabled - system can be managed remotely",
            "Remote management is disabled",
        )
    ]


def _update_mode(facts: UpdateFacts) -> str:
    """Effective update mode name for either platform's update facts."""
    if isinstance(facts, MacUpdateFacts):
        return facts.update_mode.value
    if isinstance(facts, LinuxUpdateFacts):
        if facts.download_only:
            return UpdateMode.DOWNLOAD_ONLY.value
        if facts.automatic_install:
            return UpdateMode.FULLY_AUTOMATIC.value
        return UpdateMode.DISABLED.value
    raise CheckExecutionError(
        "Automatic Updates", f"Unsupported update facts: {type(facts).__name__}"
    )


def _mode_message(mode: str) -> str:
    return f'Update mode is "{mode}" - {update_mode_description(mode)}'


async def check_automatic_updates(
    config: AutomaticUpdatesConfig, provider: FactsProvider
) -> list[CheckResult]:
    facts = await provider.automatic_updates()
    mode = _update_mode(facts)

    results = [
        _on_off(
            "Automatic Updates",
            config.enabled,
            facts.enabled,
            "Automatic update checking is enabled",
            "Automatic updates are disabled - security patches may be delayed",
        )
    ]

    if config.download_only is not None:
        is_download_only = mode == UpdateMode.DOWNLOAD_ONLY.value
        results.append(
            CheckResult(
                setting="Automatic Update Mode",
                expected="download-only" if config.download_only else "fully-automatic or disabled",
                actual=mode,
                passed=is_download_only is config.download_only,
                message=_mode_message(mode),
            )
        )
    elif config.automatic_install is not None:
        results.append(
            _on_off(
                "Automatic Installation",
                config.automatic_install,
                facts.automatic_install,
                "All updates are installed automatically",
                "Updates require manual installation",
            )
        )
    else:
        results.append(
            CheckResult(
                setting="Automatic Update Mode",
                expected="At least download-only or fully-automatic",
                actual=mode,
                passed=mode in (UpdateMode.DOWNLOAD_ONLY.value, UpdateMode.FULLY_AUTOMATIC.value),
                message=_mode_message(mode),
            )
        )

    if config.security_updates_only is not None:
        expected_security, actual_security = config.security_updates_only, facts.security_updates_only
    elif config.automatic_security_install is not None:
        expected_security, actual_security = (
            config.automatic_security_install,
            facts.automatic_security_install,
        )
    else:
        return results

    results.append(
        _on_off(
            "Security Updates",
            expected_security,
            actual_security,
            "Security updates are automatically installed",
            "Security updates require manual installation",
        )
    )
    return results


async def check_sharing_services(
    config: SharingServicesConfig, provider: FactsProvider
) -> list[CheckResult]:
    facts = await provider.sharing_services()
    results = []
    if config.file_sharing is not None:
        results.append(
            _on_off(
                "File Sharing",
                config.file_sharing,
                facts.file_sharing,
                "File sharing is enabled",
                "File sharing is disabled",
            )
        )
    if config.screen_sharing is not None:
        results.append(
            _on_off(
                "Screen Sharing",
                config.screen_sharing,
                facts.screen_sharing,
                "Screen sharing is enabled",
                "Screen sharing is disabled",
            )
        )
    if config.remote_login is not None:
        results.append(
            _on_off(
                "Remote Login Sharing",
                config.remote_login,
                facts.remote_login,
                "Remote login sharing is enabled",
                "Remote login sharing is disabled",
            )
        )
    return results


async def check_os_version(config: OSVersionConfig, provider: FactsProvider) -> list[CheckResult]:
    facts = await provider.os_version()
    label = PLATFORM_LABELS[provider.platform]
    is_latest = is_latest_sentinel(config.target_version)
    # The bundled fallback is a macOS release number
    fallback = FALLBACK_LATEST_MACOS_VERSION if provider.platform is Platform.MACOS else None
    target = resolve_target_version(config.target_version, facts.latest, fallback)

    if target is None:
        return [
            CheckResult(
                setting="OS Version",
                expected=f"latest {label} version",
                actual=facts.current,
                passed=False,
                message=f"Latest {label} version unknown - cannot check {label} {facts.current}",
            )
        ]

    passed = compare_versions(facts.current, target) >= 0

    if passed:
        detail = "checking against latest" if is_latest else f"target: {target}"
        message = f"{label} {facts.current} meets requirements ({detail})"
    else:
        detail = f"latest available: {target}" if is_latest else f"target: {target}"
        message = f"{label} {facts.current} is outdated ({detail})"

    return [
        CheckResult(
            setting="OS Version",
            expected=f"latest {label} version" if is_latest else f"≥ {target}",
            actual=facts.current,
            passed=passed,
            message=message,
        )
    ]


async def check_wifi(config: WifiSecurityConfig, provider: FactsProvider) -> list[CheckResult]:
    facts = await provider.wifi_network()
    banned = config.banned_networks
    banned_text = f"Not connected to banned networks: {', '.join(banned)}"

    if not facts.connected or not facts.network_name:
        return [
            CheckResult(
                setting="WiFi Network Security",
                expected=banned_text if banned else "Network monitoring",
                actual="Not connected to WiFi",
                passed=True,
                message="Not currently connected to any WiFi network",
            )
        ]

    network = facts.network_name
    if not banned:
        return [
            CheckResult(
                setting="WiFi Network Security",
                expected="Network monitoring (no restrictions configured)",
                actual=f"Connected to: {network}",
                passed=True,
                message=(
                    f"Currently connected to WiFi network: {network} "
                    "(no network restrictions configured)"
                ),
            )
        ]

    on_banned = bool(find_banned([network], banned))
    return [
        CheckResult(
            setting="WiFi Network Security",
            expected=banned_text,
            actual=f"Connected to: {network}",
            passed=not on_banned,
            message=(
                f"Connected to banned network: {network}"
                if on_banned
                else f"Connected to allowed network: {network}"
            ),
        )
    ]


async def check_installed_apps(config: InstalledAppsConfig, provider: FactsProvider) -> list[CheckResult]:
    facts = await provider.installed_applications()
    banned = config.banned_applications
    apps = list(facts.installed_apps)
    all_apps = ", ".join(apps)

    summary = f"{len(apps)} total apps"
    if facts.sources:
        summary += ": " + ", ".join(
            f"{len(names)} via {source}" for source, names in facts.sources.items()
        )

    if not banned:
        return [
            CheckResult(
                setting="Installed Applications",
                expected="Application monitoring (no restrictions configured)",
                actual=summary,
                passed=True,
                message=f"Detected applications: {all_apps}",
            )
        ]

    found = find_banned(apps, banned)
    if found:
        message = f"Banned applications found: {', '.join(found)} | All apps: {all_apps}"
    else:
        message = f"No banned applications detected | All apps: {all_apps}"

    return [
        CheckResult(
            setting="Installed Applications",
            expected=f"No banned applications: {', '.join(banned)}",
            actual=summary,
            passed=not found,
            message=message,
        )
    ]


# =============================================================================
# Registry
# =============================================================================


@dataclass(frozen=True, slots=True)
class CheckDefinition:
    """Binds a config section to the provider category and check it needs."""

    section: str
    category: FactCategory
    run: CheckFunction


CHECKS: tuple[CheckDefinition, ...] = (
    CheckDefinition("password_policy", FactCategory.PASSWORD_POLICY, check_password_policy),
    CheckDefinition("disk_encryption", FactCategory.DISK_ENCRYPTION, check_disk_encryption),
    CheckDefinition("password_protection", FactCategory.PASSWORD_PROTECTION, check_password_protection),
    CheckDefinition("auto_lock", FactCategory.AUTO_LOCK, check_auto_lock),
    CheckDefinition("firewall", FactCategory.FIREWALL, check_firewall),
    CheckDefinition("package_verification", FactCategory.PACKAGE_VERIFICATION, check_package_verification),
    CheckDefinition("system_integrity_protection", FactCategory.SYSTEM_INTEGRITY, check_system_integrity),
    CheckDefinition("remote_login", FactCategory.REMOTE_LOGIN, check_remote_login),
    CheckDefinition("remote_management", FactCategory.REMOTE_MANAGEMENT, check_remote_management),
    CheckDefinition("automatic_updates", FactCategory.AUTOMATIC_UPDATES, check_automatic_updates),
    CheckDefinition("sharing_services", FactCategory.SHARING_SERVICES, check_sharing_services),
    CheckDefinition("os_version", FactCategory.OS_VERSION, check_os_version),
    CheckDefinition("wifi_security", FactCategory.WIFI, check_wifi),
    CheckDefinition("installed_apps", FactCategory.INSTALLED_APPS, check_installed_apps),
)

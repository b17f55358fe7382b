"""Security check configuration for posture-audit.

A SecurityConfig is a sparse set of optional sections. A check runs only when
its section is present; an absent section means "skip", never "fail".

Keys are snake_case. camelCase keys (``autoLock``, ``maxTimeoutMinutes``) are
accepted too, as are the legacy section names ``filevault``, ``gatekeeper``
and ``password`` (read as ``disk_encryption``, ``package_verification`` and
``password_policy``).

Example usage:
    # Load from config file
    config = SecurityConfig.load_from_file(config_path)

    # Save configuration
    config.save_to_file(config_path)
"""

from __future__ import annotations

__all__ = [
    "AutoLockConfig",
    "AutomaticUpdatesConfig",
    "EnabledSetting",
    "FirewallConfig",
    "InstalledAppsConfig",
    "OSVersionConfig",
    "PasswordPolicyConfig",
    "PasswordProtectionConfig",
    "SecurityConfig",
    "SharingServicesConfig",
    "WifiSecurityConfig",
]

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from posture_audit.utils.file_helpers import (
    atomic_write_text,
    load_validated_json,
    require_file_exists,
)

# Section names used by older configuration files
_LEGACY_SECTION_KEYS: dict[str, str] = {
    "filevault": "disk_encryption",
    "gatekeeper": "package_verification",
    "password": "password_policy",
}


class _Section(BaseModel):
    """Base for config sections: accepts snake_case and camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class EnabledSetting(_Section):
    """A setting that is simply expected on or off."""

    enabled: bool


class PasswordPolicyConfig(_Section):
    """Login password policy.

    Only the password age can be audited from device facts. The complexity
    fields describe the policy in the report but are not checked against the
    password itself.

    Attributes:
        required: Whether the policy is enforced. When False the check passes.
        min_length: Minimum password length.
        max_age_days: Maximum days since the password was last changed.
    """

    required: bool = False
    min_length: int = Field(default=8, ge=0)
    require_uppercase: bool = False
    require_lowercase: bool = False
    require_number: bool = False
    require_special_char: bool = False
    max_age_days: int = Field(default=180, ge=1)


class PasswordProtectionConfig(_Section):
    """Login password and lock-screen password requirement.

    Attributes:
        enabled: Whether a login password must be set.
        require_password_immediately: If set, also check that waking from the
            screen saver requires the password without delay.
    """

    enabled: bool
    require_password_immediately: bool | None = None


class AutoLockConfig(_Section):
    """Screen auto-lock timeout limit (minutes). 0 on the device means disabled."""

    max_timeout_minutes: int = Field(ge=1)


class FirewallConfig(_Section):
    enabled: bool
    stealth_mode: bool | None = None


class AutomaticUpdatesConfig(_Section):
    """Automatic update policy.

    Only ``enabled`` is required. The granular fields select the extra checks:
    ``download_only`` takes precedence over ``automatic_install`` for the
    update-mode check; ``security_updates_only`` takes precedence over
    ``automatic_security_install`` for the security-updates check.
    """

    enabled: bool
    security_updates_only: bool | None = None
    download_only: bool | None = None
    automatic_install: bool | None = None
    automatic_security_install: bool | None = None


class SharingServicesConfig(_Section):
    file_sharing: bool | None = None
    screen_sharing: bool | None = None
    remote_login: bool | None = None


class OSVersionConfig(_Section):
    """Minimum OS version, or "latest" for the newest known release."""

    target_version: str = Field(min_length=1)


class WifiSecurityConfig(_Section):
    banned_networks: list[str] = Field(default_factory=list)


class InstalledAppsConfig(_Section):
    banned_applications: list[str] = Field(default_factory=list)


class SecurityConfig(_Section):
    """Complete set of configured checks.

    Every section is optional. Section order here is the order results
    appear in a report.

    Attributes:
        password_policy: Password age limit and complexity requirements.
        disk_encryption: FileVault (macOS) / LUKS (Linux).
        password_protection: Login password and immediate lock requirement.
        auto_lock: Maximum screen auto-lock timeout.
        firewall: Firewall and optional stealth mode.
        package_verification: Gatekeeper (macOS) / package signature checks.
        system_integrity_protection: SIP (macOS) / SELinux or AppArmor.
        remote_login: SSH access.
        remote_management: Remote desktop management.
        automatic_updates: Update policy.
        sharing_services: File and screen sharing.
        os_version: Minimum OS version.
        wifi_security: Banned WiFi networks.
        installed_apps: Banned applications.
    """

    password_policy: PasswordPolicyConfig | None = None
    disk_encryption: EnabledSetting | None = None
    password_protection: PasswordProtectionConfig | None = None
    auto_lock: AutoLockConfig | None = None
    firewall: FirewallConfig | None = None
    package_verification: EnabledSetting | None = None
    system_integrity_protection: EnabledSetting | None = None
    remote_login: EnabledSetting | None = None
    remote_management: EnabledSetting | None = None
    automatic_updates: AutomaticUpdatesConfig | None = None
    sharing_services: SharingServicesConfig | None = None
    os_version: OSVersionConfig | None = None
    wifi_security: WifiSecurityConfig | None = None
    installed_apps: InstalledAppsConfig | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_section_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for legacy, current in _LEGACY_SECTION_KEYS.items():
            if legacy not in data:
                continue
            value = data.pop(legacy)
            # An explicit current key wins over the legacy one
            if current not in data and to_camel(current) not in data:
                data[current] = value
        return data

    def configured_sections(self) -> list[str]:
        """Names of the sections that are present, in report order."""
        return [name for name in type(self).model_fields if getattr(self, name) is not None]

    def to_json_dict(self) -> dict[str, Any]:
        """Sparse snake_case dict (absent sections and fields omitted)."""
        return self.model_dump(exclude_none=True)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file atomically."""
        atomic_write_text(config_path, json.dumps(self.to_json_dict(), indent=2) + "\n")

    @classmethod
    def load_from_file(cls, config_path: Path) -> "SecurityConfig":
        """Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If config file is invalid.
        """
        require_file_exists(config_path, file_type="configuration")
        return load_validated_json(
            config_path,
            cls,
            file_type="configuration",
            recovery_hint="Run 'posture-audit profiles default' for a valid example.",
        )

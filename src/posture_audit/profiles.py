"""Predefined security configuration profiles.

Profiles:
    default    Balanced: 7 minute lock, stealth firewall, automatic installs
    strict     3 minute lock, latest OS, banned WiFi networks and applications
    relaxed    15 minute lock, no stealth mode, manual security installs
    developer  10 minute lock, SSH and sharing allowed, download-only updates,
               180-day password age limit

All profiles require disk encryption, package verification and system
integrity protection.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_PROFILE",
    "PROFILE_NAMES",
    "get_profile",
    "is_valid_profile",
]

from typing import Any

from posture_audit.config import SecurityConfig
from posture_audit.exceptions import ConfigurationError

DEFAULT_PROFILE = "default"

_BASE: dict[str, Any] = {
    "disk_encryption": {"enabled": True},
    "package_verification": {"enabled": True},
    "system_integrity_protection": {"enabled": True},
}

# Policy not enforced: the check reports it and passes
_PASSWORD_NOT_REQUIRED: dict[str, Any] = {"required": False, "min_length": 8, "max_age_days": 180}

_NO_SHARING: dict[str, Any] = {
    "file_sharing": False,
    "screen_sharing": False,
    "remote_login": False,
}

_PROFILES: dict[str, dict[str, Any]] = {
    "default": {
        "password_policy": _PASSWORD_NOT_REQUIRED,
        "password_protection": {"enabled": True, "require_password_immediately": True},
        "auto_lock": {"max_timeout_minutes": 7},
        "firewall": {"enabled": True, "stealth_mode": True},
        "remote_login": {"enabled": False},
        "remote_management": {"enabled": False},
        "automatic_updates": {
            "enabled": True,
            "automatic_install": True,
            "automatic_security_install": True,
        },
        "sharing_services": _NO_SHARING,
        "wifi_security": {"banned_networks": ["EAIguest", "xfinitywifi", "Guest"]},
    },
    "strict": {
        "password_policy": _PASSWORD_NOT_REQUIRED,
        "password_protection": {"enabled": True, "require_password_immediately": True},
        "auto_lock": {"max_timeout_minutes": 3},
        "firewall": {"enabled": True, "stealth_mode": True},
        "remote_login": {"enabled": False},
        "remote_management": {"enabled": False},
        "automatic_updates": {
            "enabled": True,
            "automatic_install": True,
            "automatic_security_install": True,
        },
        "sharing_services": _NO_SHARING,
        "os_version": {"target_version": "latest"},
        "wifi_security": {
            "banned_networks": ["EAIguest", "xfinitywifi", "Guest", "Public WiFi", "Free WiFi"],
        },
        "installed_apps": {
            "banned_applications": [
                "BitTorrent",
                "uTorrent",
                "Limewire",
                "TeamViewer",
                "AnyDesk",
                "Skype",
            ],
        },
    },
    "relaxed": {
        "password_policy": _PASSWORD_NOT_REQUIRED,
        "password_protection": {"enabled": True, "require_password_immediately": False},
        "auto_lock": {"max_timeout_minutes": 15},
        "firewall": {"enabled": True, "stealth_mode": False},
        "remote_login": {"enabled": False},
        "remote_management": {"enabled": False},
        "automatic_updates": {
            "enabled": True,
            "download_only": False,
            "automatic_security_install": False,
        },
        "sharing_services": _NO_SHARING,
    },
    "developer": {
        "password_policy": {
            "required": True,
            "min_length": 8,
            "require_uppercase": True,
            "require_lowercase": True,
            "require_number": True,
            "require_special_char": True,
            "max_age_days": 180,
        },
        "password_protection": {"enabled": True, "require_password_immediately": True},
        "auto_lock": {"max_timeout_minutes": 10},
        "firewall": {"enabled": True, "stealth_mode": False},
        "remote_login": {"enabled": True},
        "remote_management": {"enabled": False},
        "automatic_updates": {
            "enabled": True,
            "download_only": True,
            "automatic_security_install": True,
        },
        "sharing_services": {
            "file_sharing": True,
            "screen_sharing": True,
            "remote_login": True,
        },
    },
}

PROFILE_NAMES: tuple[str, ...] = tuple(_PROFILES)


def is_valid_profile(name: str) -> bool:
    return name in _PROFILES


def get_profile(name: str) -> SecurityConfig:
    """Build the SecurityConfig for a named profile.

    Raises:
        ConfigurationError: If the profile name is unknown.
    """
    if not is_valid_profile(name):
        raise ConfigurationError(
            f"Unknown profile '{name}'. Valid profiles: {', '.join(PROFILE_NAMES)}"
        )
    return SecurityConfig.model_validate({**_BASE, **_PROFILES[name]})

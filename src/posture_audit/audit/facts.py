"""Facts-provider protocol and the records it returns.

A facts provider is the platform collaborator that probes the OS (parsing
fdesetup, ufw, gsettings output and so on). The audit engine never probes
anything itself: it asks the provider for small structured records and
compares them to the configuration.

Providers differ per platform in what they can answer. Instead of optional
methods, each provider declares ``supported_categories``; the engine only
calls getters whose category is in that set and skips the rest.

Automatic update facts differ in shape between platforms, so they are a
tagged union (MacUpdateFacts | LinuxUpdateFacts) dispatched with isinstance.
"""

from __future__ import annotations

__all__ = [
    "PLATFORM_LABELS",
    "FactCategory",
    "FactsProvider",
    "FirewallFacts",
    "InstalledAppsFacts",
    "LinuxUpdateFacts",
    "MacUpdateFacts",
    "OSVersionFacts",
    "PasswordFacts",
    "Platform",
    "SharingFacts",
    "UpdateFacts",
    "UpdateMode",
    "WifiFacts",
]

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable


class Platform(str, Enum):
    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"


PLATFORM_LABELS: dict[Platform, str] = {
    Platform.MACOS: "macOS",
    Platform.LINUX: "Linux",
    Platform.WINDOWS: "Windows",
}


class FactCategory(str, Enum):
    """One getter on the facts provider."""

    PASSWORD_POLICY = "password_policy"
    DISK_ENCRYPTION = "disk_encryption"
    PASSWORD_PROTECTION = "password_protection"
    AUTO_LOCK = "auto_lock"
    FIREWALL = "firewall"
    PACKAGE_VERIFICATION = "package_verification"
    SYSTEM_INTEGRITY = "system_integrity_protection"
    REMOTE_LOGIN = "remote_login"
    REMOTE_MANAGEMENT = "remote_management"
    AUTOMATIC_UPDATES = "automatic_updates"
    SHARING_SERVICES = "sharing_services"
    OS_VERSION = "os_version"
    WIFI = "wifi_security"
    INSTALLED_APPS = "installed_apps"


class UpdateMode(str, Enum):
    """macOS software update automation level."""

    DISABLED = "disabled"
    CHECK_ONLY = "check-only"
    DOWNLOAD_ONLY = "download-only"
    FULLY_AUTOMATIC = "fully-automatic"


@dataclass(frozen=True, slots=True)
class PasswordFacts:
    enabled: bool
    require_password_immediately: bool


@dataclass(frozen=True, slots=True)
class FirewallFacts:
    enabled: bool
    stealth_mode: bool


@dataclass(frozen=True, slots=True)
class MacUpdateFacts:
    """macOS update settings: a single update mode plus install flags."""

    enabled: bool
    update_mode: UpdateMode
    security_updates_only: bool = False
    automatic_install: bool = False
    automatic_security_install: bool = False


@dataclass(frozen=True, slots=True)
class LinuxUpdateFacts:
    """Linux update settings (dnf-automatic, unattended-upgrades, ...)."""

    enabled: bool
    download_only: bool = False
    security_updates_only: bool = False
    automatic_install: bool = False
    automatic_security_install: bool = False


UpdateFacts = MacUpdateFacts | LinuxUpdateFacts


@dataclass(frozen=True, slots=True)
class SharingFacts:
    file_sharing: bool
    screen_sharing: bool
    remote_login: bool = False


@dataclass(frozen=True, slots=True)
class OSVersionFacts:
    """Installed OS version and the newest release the provider knows of.

    Attributes:
        current: Installed version, dotted numeric (e.g. "15.1.1").
        latest: Newest known release, or None if the provider cannot tell.
    """

    current: str
    latest: str | None = None


@dataclass(frozen=True, slots=True)
class WifiFacts:
    connected: bool
    network_name: str | None = None


@dataclass(frozen=True, slots=True)
class InstalledAppsFacts:
    """Installed applications.

    Attributes:
        installed_apps: All detected application names.
        sources: Names grouped by where they were found
            (e.g. {"Applications": [...], "Homebrew": [...]}).
    """

    installed_apps: tuple[str, ...]
    sources: dict[str, tuple[str, ...]] = field(default_factory=dict)


@runtime_checkable
class FactsProvider(Protocol):
    """Protocol for platform facts providers.

    Getters whose category is absent from ``supported_categories`` are never
    called by the audit engine and may raise NotImplementedError.
    """

    @property
    def platform(self) -> Platform: ...

    @property
    def supported_categories(self) -> frozenset[FactCategory]: ...

    async def password_age_days(self) -> int | None:
        """Days since the login password was last set; None if undeterminable."""
        ...

    async def disk_encryption(self) -> bool: ...

    async def password_protection(self) -> PasswordFacts: ...

    async def auto_lock_timeout(self) -> int:
        """Minutes until the screen locks; 0 means auto-lock is disabled."""
        ...

    async def firewall(self) -> FirewallFacts: ...

    async def package_verification(self) -> bool: ...

    async def system_integrity_protection(self) -> bool: ...

    async def remote_login(self) -> bool: ...

    async def remote_management(self) -> bool: ...

    async def automatic_updates(self) -> UpdateFacts: ...

    async def sharing_services(self) -> SharingFacts: ...

    async def os_version(self) -> OSVersionFacts: ...

    async def wifi_network(self) -> WifiFacts: ...

    async def installed_applications(self) -> InstalledAppsFacts: ...

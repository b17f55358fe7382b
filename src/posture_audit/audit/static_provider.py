"""Facts provider backed by a JSON document.

Lets the CLI and tests run the audit engine on facts gathered elsewhere (by a
platform agent, an MDM export, or by hand) without probing the local OS.
Only the categories present in the document are supported; the engine skips
the others.

Example facts file:
    {
      "platform": "macos",
      "password_age_days": 42,
      "disk_encryption": true,
      "auto_lock_timeout": 5,
      "firewall": {"enabled": true, "stealth_mode": false},
      "automatic_updates": {"enabled": true, "update_mode": "download-only"},
      "os_version": {"current": "15.1", "latest": "15.2"}
    }
"""

from __future__ import annotations

__all__ = [
    "FactsDocument",
    "StaticFactsProvider",
]

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from posture_audit.audit.facts import (
    FactCategory,
    FirewallFacts,
    InstalledAppsFacts,
    LinuxUpdateFacts,
    MacUpdateFacts,
    OSVersionFacts,
    PasswordFacts,
    Platform,
    SharingFacts,
    UpdateFacts,
    UpdateMode,
    WifiFacts,
)
from posture_audit.utils.file_helpers import load_validated_json, require_file_exists


class _Doc(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PasswordDoc(_Doc):
    enabled: bool
    require_password_immediately: bool = False


class FirewallDoc(_Doc):
    enabled: bool
    stealth_mode: bool = False


class UpdatesDoc(_Doc):
    """Update facts. ``update_mode`` is read on macOS, ``download_only`` elsewhere."""

    enabled: bool
    update_mode: UpdateMode = UpdateMode.DISABLED
    download_only: bool = False
    security_updates_only: bool = False
    automatic_install: bool = False
    automatic_security_install: bool = False


class SharingDoc(_Doc):
    file_sharing: bool = False
    screen_sharing: bool = False
    remote_login: bool = False


class OSVersionDoc(_Doc):
    current: str = Field(min_length=1)
    latest: str | None = None


class WifiDoc(_Doc):
    connected: bool
    network_name: str | None = None


class InstalledAppsDoc(_Doc):
    installed_apps: list[str] = Field(default_factory=list)
    sources: dict[str, list[str]] = Field(default_factory=dict)


class FactsDocument(_Doc):
    """Raw facts for one device. Absent fields mean "not collected"."""

    platform: Platform
    hostname: str | None = None
    password_age_days: int | None = Field(default=None, ge=0)
    disk_encryption: bool | None = None
    password_protection: PasswordDoc | None = None
    auto_lock_timeout: int | None = Field(default=None, ge=0)
    firewall: FirewallDoc | None = None
    package_verification: bool | None = None
    system_integrity_protection: bool | None = None
    remote_login: bool | None = None
    remote_management: bool | None = None
    automatic_updates: UpdatesDoc | None = None
    sharing_services: SharingDoc | None = None
    os_version: OSVersionDoc | None = None
    wifi: WifiDoc | None = None
    installed_applications: InstalledAppsDoc | None = None


# Document field -> category it answers
_FIELD_CATEGORIES: dict[str, FactCategory] = {
    "password_age_days": FactCategory.PASSWORD_POLICY,
    "disk_encryption": FactCategory.DISK_ENCRYPTION,
    "password_protection": FactCategory.PASSWORD_PROTECTION,
    "auto_lock_timeout": FactCategory.AUTO_LOCK,
    "firewall": FactCategory.FIREWALL,
    "package_verification": FactCategory.PACKAGE_VERIFICATION,
    "system_integrity_protection": FactCategory.SYSTEM_INTEGRITY,
    "remote_login": FactCategory.REMOTE_LOGIN,
    "remote_management": FactCategory.REMOTE_MANAGEMENT,
    "automatic_updates": FactCategory.AUTOMATIC_UPDATES,
    "sharing_services": FactCategory.SHARING_SERVICES,
    "os_version": FactCategory.OS_VERSION,
    "wifi": FactCategory.WIFI,
    "installed_applications": FactCategory.INSTALLED_APPS,
}


class StaticFactsProvider:
    """FactsProvider answering from a FactsDocument."""

    def __init__(self, document: FactsDocument) -> None:
        self._doc = document
        self._supported = frozenset(
            category
            for name, category in _FIELD_CATEGORIES.items()
            if getattr(document, name) is not None
        )

    @classmethod
    def from_file(cls, facts_path: Path) -> "StaticFactsProvider":
        """Load a facts document from JSON.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the file is not a valid facts document.
        """
        require_file_exists(facts_path, file_type="facts")
        return cls(load_validated_json(facts_path, FactsDocument, file_type="facts"))

    @property
    def platform(self) -> Platform:
        return self._doc.platform

    @property
    def hostname(self) -> str | None:
        return self._doc.hostname

    @property
    def supported_categories(self) -> frozenset[FactCategory]:
        return self._supported

    def _require(self, name: str) -> Any:
        value = getattr(self._doc, name)
        if value is None:
            raise NotImplementedError(f"No '{name}' facts collected")
        return value

    async def password_age_days(self) -> int | None:
        return self._require("password_age_days")

    async def disk_encryption(self) -> bool:
        return self._require("disk_encryption")

    async def password_protection(self) -> PasswordFacts:
        doc = self._require("password_protection")
        return PasswordFacts(
            enabled=doc.enabled,
            require_password_immediately=doc.require_password_immediately,
        )

    async def auto_lock_timeout(self) -> int:
        return self._require("auto_lock_timeout")

    async def firewall(self) -> FirewallFacts:
        doc = self._require("firewall")
        return FirewallFacts(enabled=doc.enabled, stealth_mode=doc.stealth_mode)

    async def package_verification(self) -> bool:
        return self._require("package_verification")

    async def system_integrity_protection(self) -> bool:
        return self._require("system_integrity_protection")

    async def remote_login(self) -> bool:
        return self._require("remote_login")

    async def remote_management(self) -> bool:
        return self._require("remote_management")

    async def automatic_updates(self) -> UpdateFacts:
        doc = self._require("automatic_updates")
        if self.platform is Platform.MACOS:
            return MacUpdateFacts(
                enabled=doc.enabled,
                update_mode=doc.update_mode,
                security_updates_only=doc.security_updates_only,
                automatic_install=doc.automatic_install,
                automatic_security_install=doc.automatic_security_install,
            )
        return LinuxUpdateFacts(
            enabled=doc.enabled,
            download_only=doc.download_only,
            security_updates_only=doc.security_updates_only,
            automatic_install=doc.automatic_install,
            automatic_security_install=doc.automatic_security_install,
        )

    async def sharing_services(self) -> SharingFacts:
        doc = self._require("sharing_services")
        return SharingFacts(
            file_sharing=doc.file_sharing,
            screen_sharing=doc.screen_sharing,
            remote_login=doc.remote_login,
        )

    async def os_version(self) -> OSVersionFacts:
        doc = self._require("os_version")
        return OSVersionFacts(current=doc.current, latest=doc.latest)

    async def wifi_network(self) -> WifiFacts:
        doc = self._require("wifi")
        return WifiFacts(connected=doc.connected, network_name=doc.network_name)

    async def installed_applications(self) -> InstalledAppsFacts:
        doc = self._require("installed_applications")
        return InstalledAppsFacts(
            installed_apps=tuple(doc.installed_apps),
            sources={source: tuple(names) for source, names in doc.sources.items()},
        )

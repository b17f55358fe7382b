"""Shared fixtures: signing secret and an in-memory facts provider."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from posture_audit.audit.facts import FactCategory, Platform
from posture_audit.constants import SECRET_ENV_VAR

TEST_SECRET = "test-signing-secret"


class FakeFactsProvider:
    """FactsProvider answering from a dict keyed by FactCategory.

    A value that is an exception instance is raised by its getter. A value of
    ``HANG`` makes the getter sleep until cancelled.
    """

    HANG = object()

    def __init__(self, platform: Platform = Platform.MACOS, **facts: Any) -> None:
        self._platform = platform
        self._facts = {FactCategory(name): value for name, value in facts.items()}
        self.calls: list[FactCategory] = []

    @property
    def platform(self) -> Platform:
        return self._platform

    @property
    def supported_categories(self) -> frozenset[FactCategory]:
        return frozenset(self._facts)

    async def _get(self, category: FactCategory) -> Any:
        self.calls.append(category)
        value = self._facts[category]
        if value is self.HANG:
            await asyncio.sleep(3600)
        if isinstance(value, Exception):
            raise value
        return value

    async def password_age_days(self):
        return await self._get(FactCategory.PASSWORD_POLICY)

    async def disk_encryption(self):
        return await self._get(FactCategory.DISK_ENCRYPTION)

    async def password_protection(self):
        return await self._get(FactCategory.PASSWORD_PROTECTION)

    async def auto_lock_timeout(self):
        return await self._get(FactCategory.AUTO_LOCK)

    async def firewall(self):
        return await self._get(FactCategory.FIREWALL)

    async def package_verification(self):
        return await self._get(FactCategory.PACKAGE_VERIFICATION)

    async def system_integrity_protection(self):
        return await self._get(FactCategory.SYSTEM_INTEGRITY)

    async def remote_login(self):
        return await self._get(FactCategory.REMOTE_LOGIN)

    async def remote_management(self):
        return await self._get(FactCategory.REMOTE_MANAGEMENT)

    async def automatic_updates(self):
        return await self._get(FactCategory.AUTOMATIC_UPDATES)

    async def sharing_services(self):
        return await self._get(FactCategory.SHARING_SERVICES)

    async def os_version(self):
        return await self._get(FactCategory.OS_VERSION)

    async def wifi_network(self):
        return await self._get(FactCategory.WIFI)

    async def installed_applications(self):
        return await self._get(FactCategory.INSTALLED_APPS)


@pytest.fixture
def signing_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Set the signing secret in the environment for the test."""
    monkeypatch.setenv(SECRET_ENV_VAR, TEST_SECRET)
    return TEST_SECRET


@pytest.fixture
def no_signing_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure no signing secret is present in the environment."""
    monkeypatch.delenv(SECRET_ENV_VAR, raising=False)


@pytest.fixture
def make_provider() -> Callable[..., FakeFactsProvider]:
    """Factory for FakeFactsProvider: make_provider(Platform.LINUX, firewall=...)."""
    return FakeFactsProvider


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI log files out of the user's log directory."""
    monkeypatch.setenv("POSTURE_AUDIT_LOG_DIR", str(tmp_path / "logs"))

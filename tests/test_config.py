"""Unit tests for security configuration models and built-in profiles.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from posture_audit.config import SecurityConfig
from posture_audit.exceptions import ConfigurationError
from posture_audit.profiles import (
    DEFAULT_PROFILE,
    PROFILE_NAMES,
    get_profile,
    is_valid_profile,
)


# =============================================================================
# SecurityConfig
# =============================================================================


class TestSecurityConfig:
    """Tests for SecurityConfig parsing."""

    def test_all_sections_optional(self) -> None:
        assert SecurityConfig().configured_sections() == []

    def test_camel_case_keys_accepted(self) -> None:
        # Act
        config = SecurityConfig.model_validate(
            {
                "autoLock": {"maxTimeoutMinutes": 5},
                "automaticUpdates": {"enabled": True, "downloadOnly": True},
            }
        )

        # Assert
        assert config.auto_lock is not None
        assert config.auto_lock.max_timeout_minutes == 5
        assert config.automatic_updates is not None
        assert config.automatic_updates.download_only is True

    def test_legacy_section_names(self) -> None:
        """filevault/gatekeeper map onto disk_encryption/package_verification."""
        # Act
        config = SecurityConfig.model_validate(
            {"filevault": {"enabled": True}, "gatekeeper": {"enabled": False}}
        )

        # Assert
        assert config.disk_encryption is not None
        assert config.disk_encryption.enabled is True
        assert config.package_verification is not None
        assert config.package_verification.enabled is False

    def test_legacy_password_section(self) -> None:
        """The older "password" section with camelCase keys reads as password_policy."""
        # Act
        config = SecurityConfig.model_validate(
            {"password": {"required": True, "minLength": 10, "maxAgeDays": 90}}
        )

        # Assert
        assert config.password_policy is not None
        assert config.password_policy.min_length == 10
        assert config.password_policy.max_age_days == 90
        assert config.configured_sections() == ["password_policy"]

    def test_zero_password_age_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SecurityConfig.model_validate({"password_policy": {"max_age_days": 0}})

    def test_current_name_wins_over_legacy(self) -> None:
        config = SecurityConfig.model_validate(
            {"filevault": {"enabled": False}, "disk_encryption": {"enabled": True}}
        )

        assert config.disk_encryption.enabled is True

    def test_zero_auto_lock_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SecurityConfig.model_validate({"auto_lock": {"max_timeout_minutes": 0}})

    def test_configured_sections_in_report_order(self) -> None:
        config = SecurityConfig.model_validate(
            {"os_version": {"target_version": "latest"}, "firewall": {"enabled": True}}
        )

        assert config.configured_sections() == ["firewall", "os_version"]

    def test_to_json_dict_is_sparse(self) -> None:
        config = SecurityConfig.model_validate({"firewall": {"enabled": True}})

        assert config.to_json_dict() == {"firewall": {"enabled": True}}


class TestConfigFiles:
    """Tests for save_to_file / load_from_file."""

    def test_save_and_load(self, tmp_path: Path) -> None:
        # Arrange
        path = tmp_path / "nested" / "config.json"
        config = get_profile("strict")

        # Act
        config.save_to_file(path)
        loaded = SecurityConfig.load_from_file(path)

        # Assert
        assert loaded.to_json_dict() == config.to_json_dict()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            SecurityConfig.load_from_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            SecurityConfig.load_from_file(path)

    def test_validation_error_has_hint(self, tmp_path: Path) -> None:
        # Arrange
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"auto_lock": {"max_timeout_minutes": "soon"}}))

        # Act & Assert
        with pytest.raises(ValueError, match="posture-audit profiles default"):
            SecurityConfig.load_from_file(path)


# =============================================================================
# Profiles
# =============================================================================


class TestProfiles:
    """Tests for built-in profiles."""

    def test_known_profiles(self) -> None:
        assert PROFILE_NAMES == ("default", "strict", "relaxed", "developer")
        assert DEFAULT_PROFILE == "default"

    @pytest.mark.parametrize("name", ["default", "strict", "relaxed", "developer"])
    def test_every_profile_requires_core_protections(self, name: str) -> None:
        # Act
        config = get_profile(name)

        # Assert
        assert config.disk_encryption.enabled is True
        assert config.package_verification.enabled is True
        assert config.system_integrity_protection.enabled is True

    def test_strict_is_tighter_than_default(self) -> None:
        strict = get_profile("strict")
        default = get_profile("default")

        assert strict.auto_lock.max_timeout_minutes < default.auto_lock.max_timeout_minutes
        assert strict.os_version.target_version == "latest"
        assert strict.installed_apps is not None

    def test_developer_allows_remote_login(self) -> None:
        assert get_profile("developer").remote_login.enabled is True

    @pytest.mark.parametrize("name", ["default", "strict", "relaxed", "developer"])
    def test_every_profile_sets_password_policy(self, name: str) -> None:
        policy = get_profile(name).password_policy

        assert policy is not None
        assert policy.max_age_days == 180
        assert policy.required is (name == "developer")

    def test_unknown_profile(self) -> None:
        # Act & Assert
        with pytest.raises(ConfigurationError, match="Unknown profile 'paranoid'") as exc_info:
            get_profile("paranoid")

        assert exc_info.value.failure_type == "configuration_failure"
        assert exc_info.value.exit_code == 1

    def test_is_valid_profile(self) -> None:
        assert is_valid_profile("relaxed") is True
        assert is_valid_profile("eai") is False

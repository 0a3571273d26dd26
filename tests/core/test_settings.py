"""Tests for vellum.core.settings.

Covers:
- VellumSettings defaults
- Environment variable overrides (VELLUM_ prefix)
- Field validation
- get_settings caching
"""

import pytest
from pydantic import ValidationError

from vellum.core.settings import VellumSettings, clear_settings_cache, get_settings


class TestVellumSettingsDefaults:
    def test_default_log_level(self, settings):
        assert settings.log_level == "INFO"

    def test_default_log_format(self, settings):
        assert settings.log_format == "console"

    def test_default_primary_key(self, settings):
        assert settings.default_primary_key == "id"

    def test_unknown_fields_allowed_by_default(self, settings):
        assert settings.reject_unknown_fields is False

    def test_thread_safe_by_default(self, settings):
        assert settings.thread_safe is True


class TestVellumSettingsEnvOverride:
    def test_primary_key_from_env(self, monkeypatch):
        monkeypatch.setenv("VELLUM_DEFAULT_PRIMARY_KEY", "uuid")
        assert VellumSettings(_env_file=None).default_primary_key == "uuid"

    def test_reject_unknown_fields_from_env(self, monkeypatch):
        monkeypatch.setenv("VELLUM_REJECT_UNKNOWN_FIELDS", "true")
        assert VellumSettings(_env_file=None).reject_unknown_fields is True

    def test_thread_safe_from_env(self, monkeypatch):
        monkeypatch.setenv("VELLUM_THREAD_SAFE", "false")
        assert VellumSettings(_env_file=None).thread_safe is False

    def test_unprefixed_variables_are_ignored(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert VellumSettings(_env_file=None).log_level == "INFO"


class TestVellumSettingsValidation:
    def test_log_level_is_normalized(self):
        assert VellumSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            VellumSettings(_env_file=None, log_level="chatty")

    def test_unknown_log_format_rejected(self):
        with pytest.raises(ValidationError):
            VellumSettings(_env_file=None, log_format="xml")

    def test_empty_primary_key_rejected(self):
        with pytest.raises(ValidationError):
            VellumSettings(_env_file=None, default_primary_key="")


class TestGetSettings:
    def test_returns_cached_instance(self):
        assert get_settings() is get_settings()

    def test_force_reload_reads_environment_again(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("VELLUM_DEFAULT_PRIMARY_KEY", "key")

        reloaded = get_settings(force_reload=True)

        assert reloaded is not first
        assert reloaded.default_primary_key == "key"
        assert get_settings() is reloaded

    def test_clear_settings_cache(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first

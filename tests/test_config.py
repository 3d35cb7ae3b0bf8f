"""Tests for openclaw_secure.config: environment-driven settings."""

import pytest

from openclaw_secure.config import Settings, get_settings, reset_settings
from openclaw_secure.constants import DEFAULT_CONFIG_PATH, DEFAULT_HEALTH_URL


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.config_path == DEFAULT_CONFIG_PATH
        assert settings.backend == "keychain"
        assert settings.timeout_ms == 10_000
        assert settings.health_url == DEFAULT_HEALTH_URL
        assert settings.command_timeout == 15.0

    def test_frozen(self):
        settings = Settings()
        with pytest.raises(AttributeError):
            settings.backend = "aws"  # type: ignore[misc]


class TestGetSettings:
    def test_defaults_without_env(self):
        settings = get_settings()
        assert settings.config_path == DEFAULT_CONFIG_PATH
        assert settings.gateway_command == "openclaw gateway start"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENCLAW_SECURE_CONFIG", "/tmp/openclaw.json")
        monkeypatch.setenv("OPENCLAW_SECURE_BACKEND", "bitwarden")
        monkeypatch.setenv("OPENCLAW_SECURE_TIMEOUT_MS", "2500")
        monkeypatch.setenv("OPENCLAW_SECURE_HEALTH_URL", "http://127.0.0.1:9999/health")
        monkeypatch.setenv("OPENCLAW_SECURE_COMMAND_TIMEOUT", "3.5")
        reset_settings()

        settings = get_settings()

        assert settings.config_path == "/tmp/openclaw.json"
        assert settings.backend == "bitwarden"
        assert settings.timeout_ms == 2500
        assert settings.health_url == "http://127.0.0.1:9999/health"
        assert settings.command_timeout == 3.5

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_reset(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("OPENCLAW_SECURE_BACKEND", "pass")
        assert get_settings().backend == "keychain"

        reset_settings()

        assert get_settings() is not first
        assert get_settings().backend == "pass"

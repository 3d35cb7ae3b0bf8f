"""
Runtime settings for openclaw-secure.

Settings come from environment variables with sensible defaults. Command-line
flags and the preferences file are layered on top of these by the CLI.

Usage:
    from openclaw_secure.config import get_settings
    settings = get_settings()
    print(settings.config_path)   # "~/.openclaw/openclaw.json"
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from openclaw_secure.constants import (
    DEFAULT_BACKEND,
    DEFAULT_CONFIG_PATH,
    DEFAULT_GATEWAY_COMMAND,
    DEFAULT_HEALTH_URL,
    DEFAULT_TIMEOUT_MS,
    PREFERENCES_PATH,
)


@dataclass(frozen=True)
class Settings:
    """Top-level openclaw-secure settings."""

    config_path: str = DEFAULT_CONFIG_PATH
    backend: str = DEFAULT_BACKEND
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    gateway_command: str = DEFAULT_GATEWAY_COMMAND
    health_url: str = DEFAULT_HEALTH_URL
    preferences_path: str = PREFERENCES_PATH
    # Seconds allowed for any single vendor CLI call
    command_timeout: float = 15.0


# Singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the singleton settings from environment variables."""
    global _settings
    if _settings is not None:
        return _settings
    _settings = _load_from_env()
    return _settings


def _load_from_env() -> Settings:
    return Settings(
        config_path=os.environ.get("OPENCLAW_SECURE_CONFIG", DEFAULT_CONFIG_PATH),
        backend=os.environ.get("OPENCLAW_SECURE_BACKEND", DEFAULT_BACKEND),
        timeout_ms=int(os.environ.get("OPENCLAW_SECURE_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
        gateway_command=os.environ.get("OPENCLAW_SECURE_GATEWAY_COMMAND", DEFAULT_GATEWAY_COMMAND),
        health_url=os.environ.get("OPENCLAW_SECURE_HEALTH_URL", DEFAULT_HEALTH_URL),
        preferences_path=os.environ.get("OPENCLAW_SECURE_PREFERENCES", PREFERENCES_PATH),
        command_timeout=float(os.environ.get("OPENCLAW_SECURE_COMMAND_TIMEOUT", "15")),
    )


def reset_settings() -> None:
    """Reset the singleton settings (for testing)."""
    global _settings
    _settings = None

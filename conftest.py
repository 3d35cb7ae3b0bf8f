"""
Root-level shared test fixtures.

Inherited by tests/ and the test suites that live beside the code
(openclaw_secure/backends/tests).
"""

from __future__ import annotations

import pytest

from openclaw_secure.config import reset_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and preferences file."""
    for key in [
        "OPENCLAW_SECURE_CONFIG",
        "OPENCLAW_SECURE_BACKEND",
        "OPENCLAW_SECURE_TIMEOUT_MS",
        "OPENCLAW_SECURE_GATEWAY_COMMAND",
        "OPENCLAW_SECURE_HEALTH_URL",
        "OPENCLAW_SECURE_COMMAND_TIMEOUT",
    ]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("OPENCLAW_SECURE_PREFERENCES", str(tmp_path / "no-prefs.json"))
    reset_settings()
    yield
    reset_settings()

"""User preferences file (~/.openclaw-secure.json).

Preferences only fill in defaults; explicit command-line flags always win.
A missing or broken file is treated as empty, never as an error:

    {
      "backend": "1password",
      "vault": "Private",
      "discovery": {"enabled": true, "excludePaths": ["channels.dev.*"]}
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from openclaw_secure.constants import PREFERENCES_PATH

logger = logging.getLogger(__name__)


class _PrefsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class DiscoveryPreferences(_PrefsModel):
    enabled: bool | None = None
    exclude_paths: list[str] = Field(default_factory=list)
    additional_paths: list[str] = Field(default_factory=list)
    include_unknown: bool | None = None


class Preferences(_PrefsModel):
    backend: str | None = None
    vault: str | None = None
    region: str | None = None
    project: str | None = None
    vault_name: str | None = None
    addr: str | None = None
    doppler_project: str | None = None
    doppler_config: str | None = None
    discovery: DiscoveryPreferences = Field(default_factory=DiscoveryPreferences)


def load_preferences(path: str | Path | None = None) -> Preferences:
    """Load preferences, or return empty ones if the file is absent or invalid."""
    file_path = Path(path or PREFERENCES_PATH).expanduser()
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Preferences()
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable preferences %s: %s", file_path, e)
        return Preferences()

    if not isinstance(raw, dict):
        logger.debug("Ignoring preferences %s: not a JSON object", file_path)
        return Preferences()
    try:
        return Preferences.model_validate(raw)
    except ValidationError as e:
        logger.debug("Ignoring invalid preferences %s: %s", file_path, e)
        return Preferences()

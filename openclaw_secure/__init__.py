"""
openclaw-secure: keep OpenClaw API keys in a secret backend, not in openclaw.json.

Public API:
    discover_secrets(config)                  -> secrets found in a config dict
    store_keys(path, secret_map, backend)     -> move values into the backend
    restore_keys(path, secret_map, backend)   -> write values back into the config
    scrub_keys(path, secret_map)              -> replace values with the placeholder
    check_keys(secret_map, backend)           -> which keys the backend has
    migrate_keys(backend)                     -> rename v1.x key names
"""

from __future__ import annotations

__version__ = "0.1.0"

from openclaw_secure.backends import BACKEND_NAMES, BackendOptions, SecretBackend, create_backend
from openclaw_secure.constants import (
    DEFAULT_BACKEND,
    DEFAULT_CONFIG_PATH,
    DEFAULT_SECRET_MAP,
    DEFAULT_TIMEOUT_MS,
    LEGACY_KEY_NAMES,
    PLACEHOLDER,
)
from openclaw_secure.discovery import (
    DiscoveryOptions,
    discover_secrets,
    discovered_to_secret_map,
    path_to_key_name,
)
from openclaw_secure.document import backup_config, expand_path, read_config, write_config
from openclaw_secure.lifecycle import check_keys, migrate_keys, restore_keys, scrub_keys, store_keys
from openclaw_secure.models import (
    DiscoveredSecret,
    KeyCheckResult,
    MatchType,
    MigrateResult,
    SecretEntry,
    StoreResult,
)
from openclaw_secure.paths import get_by_path, has_path, set_by_path
from openclaw_secure.preferences import Preferences, load_preferences

__all__ = [
    "BACKEND_NAMES",
    "DEFAULT_BACKEND",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_SECRET_MAP",
    "DEFAULT_TIMEOUT_MS",
    "LEGACY_KEY_NAMES",
    "PLACEHOLDER",
    "BackendOptions",
    "DiscoveredSecret",
    "DiscoveryOptions",
    "KeyCheckResult",
    "MatchType",
    "MigrateResult",
    "Preferences",
    "SecretBackend",
    "SecretEntry",
    "StoreResult",
    "backup_config",
    "check_keys",
    "create_backend",
    "discover_secrets",
    "discovered_to_secret_map",
    "expand_path",
    "get_by_path",
    "has_path",
    "load_preferences",
    "migrate_keys",
    "path_to_key_name",
    "read_config",
    "restore_keys",
    "scrub_keys",
    "set_by_path",
    "store_keys",
    "write_config",
]

"""Moving secrets between openclaw.json and a secret backend.

Each operation that touches the config reads it once at the start and writes
it once at the end. Backend writes are not transactional with that final
write: if ``store_keys`` fails on entry k, entries before k are already in
the backend but the config on disk still holds every plaintext value. That
is safe (nothing leaks), and re-running ``store`` finishes the job.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from openclaw_secure.backends.base import SecretBackend
from openclaw_secure.constants import LEGACY_KEY_NAMES, PLACEHOLDER
from openclaw_secure.discovery import ensure_unique_key_names, path_to_key_name
from openclaw_secure.document import read_config, write_config
from openclaw_secure.models import KeyCheckResult, MigrateResult, SecretEntry, StoreResult
from openclaw_secure.paths import MISSING, get_by_path, set_by_path

logger = logging.getLogger(__name__)

REASON_NOT_FOUND = "not found in config"
REASON_NOT_STRING = "not a string"
REASON_ALREADY_STORED = "already stored"

REASON_IDENTICAL = "identical"
REASON_NO_OLD_VALUE = "no value at old name"
REASON_NEW_EXISTED = "deleted old, new already existed"


def store_keys(
    config_path: str | Path,
    secret_map: Iterable[SecretEntry],
    backend: SecretBackend,
    *,
    on_result: Callable[[StoreResult], None] | None = None,
) -> list[StoreResult]:
    """Push each secret to the backend and replace it with the placeholder.

    ``on_result`` is called as each entry is processed, so callers can report
    progress even if a later backend call raises.
    """
    entries = list(secret_map)
    ensure_unique_key_names(entries)
    config = read_config(config_path)
    results: list[StoreResult] = []

    for entry in entries:
        value = get_by_path(config, entry.config_path, MISSING)
        if value is MISSING or value is None:
            result = StoreResult(entry.key_name, entry.config_path, False, True, REASON_NOT_FOUND)
        elif not isinstance(value, str):
            result = StoreResult(entry.key_name, entry.config_path, False, True, REASON_NOT_STRING)
        elif value == PLACEHOLDER:
            result = StoreResult(
                entry.key_name, entry.config_path, False, True, REASON_ALREADY_STORED
            )
        else:
            backend.set(entry.key_name, value)
            config = set_by_path(config, entry.config_path, PLACEHOLDER)
            result = StoreResult(entry.key_name, entry.config_path, True, False)
            logger.info("Stored %s in %s", entry.key_name, backend.name)

        results.append(result)
        if on_result is not None:
            on_result(result)

    write_config(config_path, config)
    return results


def restore_keys(
    config_path: str | Path,
    secret_map: Iterable[SecretEntry],
    backend: SecretBackend,
) -> list[SecretEntry]:
    """Write backend values back into the config. Returns the restored entries.

    Entries the backend has no value for are left exactly as they are.
    """
    entries = list(secret_map)
    ensure_unique_key_names(entries)
    config = read_config(config_path)
    restored: list[SecretEntry] = []

    for entry in entries:
        value = backend.get(entry.key_name)
        if value is None:
            logger.debug("No value for %s in %s, leaving it as is", entry.key_name, backend.name)
            continue
        config = set_by_path(config, entry.config_path, value)
        restored.append(entry)

    write_config(config_path, config)
    return restored


def scrub_keys(config_path: str | Path, secret_map: Iterable[SecretEntry]) -> int:
    """Replace every mapped value with the placeholder. Returns how many changed."""
    config = read_config(config_path)
    scrubbed = 0

    for entry in secret_map:
        value = get_by_path(config, entry.config_path, MISSING)
        if value is not MISSING and value != PLACEHOLDER:
            config = set_by_path(config, entry.config_path, PLACEHOLDER)
            scrubbed += 1

    write_config(config_path, config)
    logger.debug("Scrubbed %d value(s) from %s", scrubbed, config_path)
    return scrubbed


def check_keys(secret_map: Iterable[SecretEntry], backend: SecretBackend) -> list[KeyCheckResult]:
    """Report which key names have a value in the backend."""
    return [
        KeyCheckResult(entry.key_name, entry.config_path, backend.get(entry.key_name) is not None)
        for entry in secret_map
    ]


def migrate_keys(
    backend: SecretBackend,
    legacy_names: Mapping[str, str] = LEGACY_KEY_NAMES,
) -> list[MigrateResult]:
    """Move values stored under v1.x key names to their path-derived names.

    Safe to run on every start: once the old names are gone each entry
    reports "no value at old name". If both names hold a value, the new one
    wins and the old one is deleted.
    """
    results: list[MigrateResult] = []

    for config_path, old_name in legacy_names.items():
        new_name = path_to_key_name(config_path)

        if old_name == new_name:
            results.append(MigrateResult(config_path, old_name, new_name, False, REASON_IDENTICAL))
            continue

        old_value = backend.get(old_name)
        if old_value is None:
            results.append(
                MigrateResult(config_path, old_name, new_name, False, REASON_NO_OLD_VALUE)
            )
            continue

        if backend.get(new_name) is not None:
            backend.delete(old_name)
            results.append(MigrateResult(config_path, old_name, new_name, True, REASON_NEW_EXISTED))
            logger.info("Deleted legacy key %s (%s already set)", old_name, new_name)
            continue

        backend.set(new_name, old_value)
        backend.delete(old_name)
        results.append(MigrateResult(config_path, old_name, new_name, True))
        logger.info("Migrated %s -> %s", old_name, new_name)

    return results

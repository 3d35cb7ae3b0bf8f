"""Result and entry types passed between discovery, lifecycle and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class MatchType(StrEnum):
    """Why discovery flagged a value, in descending confidence."""

    KNOWN_PATH = "known-path"
    KEY_PATTERN = "key-pattern"
    VALUE_PATTERN = "value-pattern"


@dataclass(frozen=True)
class SecretEntry:
    """Maps a dot-path in the config to the key name used in the backend."""

    config_path: str
    key_name: str


@dataclass(frozen=True)
class DiscoveredSecret:
    """A secret found by discovery.

    ``value`` is held in memory for display and validation only; it is
    excluded from ``repr`` so it never reaches logs by accident.
    """

    config_path: str
    key_name: str
    match_type: MatchType
    value: str = field(repr=False)

    def to_entry(self) -> SecretEntry:
        return SecretEntry(self.config_path, self.key_name)


@dataclass(frozen=True)
class StoreResult:
    key_name: str
    config_path: str
    stored: bool
    skipped: bool
    reason: str = ""


@dataclass(frozen=True)
class KeyCheckResult:
    key_name: str
    config_path: str
    exists: bool


@dataclass(frozen=True)
class MigrateResult:
    config_path: str
    old_name: str
    new_name: str
    migrated: bool
    reason: str = ""

"""Auto-discovery of secrets in an OpenClaw config document.

Walks the whole tree and flags string leaves by, in order of confidence:

1. caller-supplied additional paths and known secret paths
2. secret-looking field names (``*Token``, ``apiKey``, ...)
3. optionally, credential-shaped values (``sk-...``, ``xoxb-...``)

Results are sorted by path so output is stable and diffable.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from openclaw_secure.constants import PLACEHOLDER
from openclaw_secure.errors import KeyNameCollisionError
from openclaw_secure.models import DiscoveredSecret, MatchType, SecretEntry
from openclaw_secure.paths import SEPARATOR, split_path
from openclaw_secure.patterns import (
    MIN_SECRET_LENGTH,
    SECRET_KEY_EXCLUDE,
    is_known_secret_path,
    is_secret_key_name,
    matches_secret_value_pattern,
)

logger = logging.getLogger(__name__)

# Container words that only add nesting, not identity.
STRUCTURAL_SEGMENTS = frozenset(
    {"channels", "skills", "tools", "accounts", "entries", "web", "media"}
)

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


@dataclass
class DiscoveryOptions:
    include_unknown_patterns: bool = False
    additional_paths: list[str] = field(default_factory=list)
    # exact paths (which also cover their descendants) or globs with "*"
    exclude_paths: list[str] = field(default_factory=list)
    # also report paths that already hold the placeholder, i.e. every managed path
    include_stored: bool = False


def _kebab(segment: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"\1-\2", segment).lower()


def path_to_key_name(config_path: str) -> str:
    """Derive a flat backend key name from a config path.

    Examples:
        channels.telegram.botToken                -> telegram-bot-token
        channels.telegram.accounts.main.botToken  -> telegram-main-bot-token
        skills.entries.openai-whisper-api.apiKey  -> openai-whisper-api-api-key
        gateway.auth.token                        -> gateway-auth-token
    """
    segments = split_path(config_path)
    parts = [
        _kebab(segment)
        for segment in segments
        if segment not in STRUCTURAL_SEGMENTS and not segment.isdecimal()
    ]
    if not parts:
        # e.g. "tools.media.0": keep the last segment rather than return ""
        return _kebab(segments[-1])
    return "-".join(parts)


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    return re.compile(".*".join(re.escape(piece) for piece in pattern.split("*")))


def matches_exclude_pattern(path: str, patterns: Iterable[str]) -> bool:
    """True if ``path`` is excluded.

    ``channels.dev.*`` excludes everything below ``channels.dev``; a pattern
    without ``*`` excludes that path and its descendants.
    """
    for pattern in patterns:
        if "*" in pattern:
            if _glob_to_regex(pattern).fullmatch(path):
                return True
        elif path == pattern or path.startswith(pattern + SEPARATOR):
            return True
    return False


def _iter_string_leaves(
    node: Any, path: tuple[str, ...] = ()
) -> Iterator[tuple[tuple[str, ...], str]]:
    if isinstance(node, dict):
        for key, value in node.items():
            yield from _iter_string_leaves(value, (*path, str(key)))
    elif isinstance(node, list):
        for index, item in enumerate(node):
            yield from _iter_string_leaves(item, (*path, str(index)))
    elif isinstance(node, str) and path:
        yield path, node


def _classify(
    full_path: str, value: str, options: DiscoveryOptions, additional: frozenset[str]
) -> MatchType | None:
    if full_path in additional or is_known_secret_path(full_path):
        return MatchType.KNOWN_PATH
    if is_secret_key_name(full_path.rsplit(SEPARATOR, 1)[-1]):
        return MatchType.KEY_PATTERN
    if options.include_unknown_patterns and (
        value == PLACEHOLDER or matches_secret_value_pattern(value)
    ):
        # a stored value no longer shows its shape; the placeholder marks it
        return MatchType.VALUE_PATTERN
    return None


def discover_secrets(
    config: dict[str, Any], options: DiscoveryOptions | None = None
) -> list[DiscoveredSecret]:
    """Find every secret-looking string in ``config``."""
    options = options or DiscoveryOptions()
    additional = frozenset(options.additional_paths)
    found: dict[str, DiscoveredSecret] = {}

    for segments, value in _iter_string_leaves(config):
        full_path = SEPARATOR.join(segments)
        if full_path in found:
            continue
        if matches_exclude_pattern(full_path, options.exclude_paths):
            continue
        if segments[-1] in SECRET_KEY_EXCLUDE:
            continue
        if value == PLACEHOLDER and not options.include_stored:
            continue
        if len(value) < MIN_SECRET_LENGTH:
            continue

        match_type = _classify(full_path, value, options, additional)
        if match_type is None:
            continue
        found[full_path] = DiscoveredSecret(
            config_path=full_path,
            key_name=path_to_key_name(full_path),
            match_type=match_type,
            value=value,
        )

    secrets = sorted(found.values(), key=lambda s: s.config_path)
    logger.debug("Discovered %d secret(s)", len(secrets))
    return secrets


def discovered_to_secret_map(discovered: Iterable[DiscoveredSecret]) -> list[SecretEntry]:
    return [secret.to_entry() for secret in discovered]


def secret_entry_to_discovered(
    entry: SecretEntry, value: str, match_type: MatchType = MatchType.KNOWN_PATH
) -> DiscoveredSecret:
    """Wrap a hand-authored entry for display alongside discovered ones."""
    return DiscoveredSecret(entry.config_path, entry.key_name, match_type, value)


def find_key_name_collisions(secret_map: Iterable[SecretEntry]) -> dict[str, list[str]]:
    """Map each key name used by more than one config path to those paths."""
    by_name: dict[str, list[str]] = {}
    for entry in secret_map:
        paths = by_name.setdefault(entry.key_name, [])
        if entry.config_path not in paths:
            paths.append(entry.config_path)
    return {name: paths for name, paths in by_name.items() if len(paths) > 1}


def ensure_unique_key_names(secret_map: Iterable[SecretEntry]) -> None:
    """Raise ``KeyNameCollisionError`` for the first shared key name."""
    collisions = find_key_name_collisions(secret_map)
    if collisions:
        name, paths = next(iter(collisions.items()))
        raise KeyNameCollisionError(name, paths)

"""Lexical and structural rules that decide whether a config value is a secret.

Three independent predicates, from most to least confident:

- ``is_known_secret_path``: the full dot-path is a known secret location.
- ``is_secret_key_name``: the last path segment looks like a secret field.
- ``matches_secret_value_pattern``: the value itself has a credential shape.

Extend the tables here; the tree walk in ``discovery`` does not change.
"""

from __future__ import annotations

import re

# Shortest string considered a plausible secret.
MIN_SECRET_LENGTH = 16

SECRET_KEY_SUFFIXES = ("token", "apikey", "secret", "password", "credential")

SECRET_KEY_EXACT = frozenset(
    {
        "apiKey",
        "token",
        "password",
        "secret",
        "botToken",
        "appToken",
        "userToken",
        "webhookSecret",
        "signingSecret",
    }
)

# Secret-looking names that hold something else. Always wins over suffixes.
SECRET_KEY_EXCLUDE = frozenset(
    {
        "tokenFile",  # path to a file
        "mode",  # "token" is an auth mode value
        "tlsFingerprint",
        "sessionPrefix",
    }
)

SECRET_VALUE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^sk-[a-zA-Z0-9\-_]{20,}$"),  # OpenAI
    re.compile(r"^sk-proj-[a-zA-Z0-9\-_]{20,}$"),  # OpenAI project
    re.compile(r"^xox[baprs]-[a-zA-Z0-9-]+$"),  # Slack
    re.compile(r"^[0-9]+:[A-Za-z0-9_-]{30,}$"),  # Telegram bot
    re.compile(r"^ghp_[a-zA-Z0-9]{20,}$"),  # GitHub PAT
    re.compile(r"^gho_[a-zA-Z0-9]{20,}$"),  # GitHub OAuth
    re.compile(r"^glpat-[a-zA-Z0-9\-_]{20,}$"),  # GitLab PAT
    re.compile(r"^AKIA[A-Z0-9]{16}$"),  # AWS access key id
    re.compile(r"^AIza[a-zA-Z0-9\-_]{35}$"),  # Google API key
    re.compile(r"^[a-f0-9]{32,64}$"),  # hex (gateway, webhooks)
)

KNOWN_SECRET_PATHS = frozenset(
    {
        "gateway.auth.token",
        "gateway.auth.password",
        "gateway.remote.token",
        "gateway.remote.password",
        "tts.elevenlabs.apiKey",
        "tts.openai.apiKey",
        "tools.web.search.apiKey",
        "tools.web.search.perplexity.apiKey",
        "tools.web.search.grok.apiKey",
        "tools.web.fetch.firecrawl.apiKey",
        "tools.memorySearch.remote.apiKey",
    }
)

_CHANNEL_FIELDS = "botToken|appToken|userToken|token|webhookSecret|signingSecret"

KNOWN_SECRET_PATH_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"^channels\.[^.]+\.(?:{_CHANNEL_FIELDS})$"),
    re.compile(rf"^channels\.[^.]+\.accounts\.[^.]+\.(?:{_CHANNEL_FIELDS})$"),
    re.compile(r"^skills\.entries\.[^.]+\.apiKey$"),
    # every env var handed to a skill is treated as a secret
    re.compile(r"^skills\.entries\.[^.]+\.env\.[^.]+$"),
    re.compile(
        r"^skills\.entries\.[^.]+\.config\..+(?:token|apikey|secret|password|credential)$",
        re.IGNORECASE,
    ),
    re.compile(r"^tools\.media\.[^.]+\.models\.\d+\.apiKey$"),
    re.compile(r"^tools\.media\.models\.\d+\.apiKey$"),
    re.compile(r"^models\.providers\.[^.]+\.apiKey$"),
)


def is_known_secret_path(path: str) -> bool:
    """True if ``path`` is a known secret location (exact or by pattern)."""
    if path in KNOWN_SECRET_PATHS:
        return True
    return any(pattern.fullmatch(path) for pattern in KNOWN_SECRET_PATH_PATTERNS)


def is_secret_key_name(key: str) -> bool:
    """True if a field called ``key`` probably holds a secret."""
    if key in SECRET_KEY_EXCLUDE:
        return False
    if key in SECRET_KEY_EXACT:
        return True
    return key.lower().endswith(SECRET_KEY_SUFFIXES)


def matches_secret_value_pattern(value: str) -> bool:
    """True if ``value`` is long enough and shaped like a known credential."""
    if len(value) < MIN_SECRET_LENGTH:
        return False
    return any(pattern.fullmatch(value) for pattern in SECRET_VALUE_PATTERNS)

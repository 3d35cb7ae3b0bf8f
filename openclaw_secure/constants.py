"""Static names, defaults and secret maps shared across openclaw-secure."""

from __future__ import annotations

from openclaw_secure.models import SecretEntry

# Stands in for a value that lives in the backend. Discovery and every
# lifecycle operation treat it as "already stored".
PLACEHOLDER = "[STORED_IN_KEYCHAIN]"

SERVICE_PREFIX = "openclaw"
KEYCHAIN_ACCOUNT = "openclaw"

DEFAULT_CONFIG_PATH = "~/.openclaw/openclaw.json"
PREFERENCES_PATH = "~/.openclaw-secure.json"
DEFAULT_TIMEOUT_MS = 10_000
DEFAULT_GATEWAY_COMMAND = "openclaw gateway start"
DEFAULT_HEALTH_URL = "http://127.0.0.1:3577/health"
DEFAULT_BACKEND = "keychain"

# Hand-maintained map used with --no-auto (the v1.x behaviour).
DEFAULT_SECRET_MAP: list[SecretEntry] = [
    SecretEntry("channels.telegram.botToken", "telegram-bot-token"),
    SecretEntry("gateway.auth.token", "gateway-auth-token"),
    SecretEntry("skills.entries.openai-whisper-api.apiKey", "whisper-api-key"),
]

# config path -> key name used by v1.x, before names were derived from paths
LEGACY_KEY_NAMES: dict[str, str] = {
    "skills.entries.openai-whisper-api.apiKey": "whisper-api-key",
    "tools.web.search.apiKey": "brave-search-api-key",
}

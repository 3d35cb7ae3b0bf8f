"""
Secret backends: where values live while openclaw.json holds placeholders.

Usage:
    from openclaw_secure.backends import BackendOptions, create_backend
    backend = create_backend("1password", BackendOptions(vault="Private"))
    backend.set("telegram-bot-token", "...")
"""

from __future__ import annotations

from openclaw_secure.backends.aws import AwsSecretsBackend
from openclaw_secure.backends.azure import AzureKeyVaultBackend
from openclaw_secure.backends.base import (
    BackendOptions,
    CliBackend,
    SecretBackend,
    check_cli_available,
    run_command,
)
from openclaw_secure.backends.bitwarden import BitwardenBackend
from openclaw_secure.backends.doppler import DopplerBackend
from openclaw_secure.backends.gcloud import GCloudSecretsBackend
from openclaw_secure.backends.keychain import KeychainBackend
from openclaw_secure.backends.lastpass import LastPassBackend
from openclaw_secure.backends.onepassword import OnePasswordBackend
from openclaw_secure.backends.passstore import PassBackend
from openclaw_secure.backends.vault import VaultBackend
from openclaw_secure.errors import BackendUnavailableError, ValidationError

BACKENDS: dict[str, type[CliBackend]] = {
    "keychain": KeychainBackend,
    "1password": OnePasswordBackend,
    "bitwarden": BitwardenBackend,
    "lastpass": LastPassBackend,
    "aws": AwsSecretsBackend,
    "gcloud": GCloudSecretsBackend,
    "azure": AzureKeyVaultBackend,
    "pass": PassBackend,
    "doppler": DopplerBackend,
    "vault": VaultBackend,
}

BACKEND_NAMES = tuple(BACKENDS)

BACKEND_HINTS = {
    "keychain": "The keychain backend requires macOS.",
    "1password": "Install: https://developer.1password.com/docs/cli/ then: op signin",
    "bitwarden": "Install: https://bitwarden.com/help/cli/ then: bw login && bw unlock",
    "lastpass": "Install: https://github.com/lastpass/lastpass-cli then: lpass login",
    "aws": "Install: https://aws.amazon.com/cli/ then: aws configure",
    "gcloud": "Install: https://cloud.google.com/sdk/docs/install then: gcloud auth login",
    "azure": "Install: https://learn.microsoft.com/en-us/cli/azure/install then: az login",
    "pass": "Install: https://www.passwordstore.org/ then: pass init <gpg-id>",
    "doppler": "Install: https://docs.doppler.com/docs/cli then: doppler login",
    "vault": "Install: https://developer.hashicorp.com/vault/install then: vault login",
}


def create_backend(
    name: str, options: BackendOptions | None = None, *, timeout: float | None = None
) -> SecretBackend:
    """Instantiate a backend by name. Raises ValidationError for unknown names."""
    try:
        cls = BACKENDS[name]
    except KeyError:
        raise ValidationError(
            f'Unknown backend "{name}". Supported: {", ".join(BACKEND_NAMES)}'
        ) from None
    return cls(options, timeout=timeout)


def ensure_available(backend: SecretBackend) -> None:
    """Raise BackendUnavailableError (with a remediation hint) if unusable."""
    if not backend.available():
        raise BackendUnavailableError(backend.name, BACKEND_HINTS.get(backend.name, ""))


__all__ = [
    "BACKENDS",
    "BACKEND_HINTS",
    "BACKEND_NAMES",
    "AwsSecretsBackend",
    "AzureKeyVaultBackend",
    "BackendOptions",
    "BitwardenBackend",
    "CliBackend",
    "DopplerBackend",
    "GCloudSecretsBackend",
    "KeychainBackend",
    "LastPassBackend",
    "OnePasswordBackend",
    "PassBackend",
    "SecretBackend",
    "VaultBackend",
    "check_cli_available",
    "create_backend",
    "ensure_available",
    "run_command",
]

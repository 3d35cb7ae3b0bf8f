"""Azure Key Vault backend via the az CLI. Requires --vault-name."""

from __future__ import annotations

import json

from openclaw_secure.backends.base import BackendOptions, CliBackend
from openclaw_secure.errors import BackendOperationError, CommandError, ValidationError


class AzureKeyVaultBackend(CliBackend):
    name = "azure"
    cli = "az"
    not_found_markers = ("SecretNotFound", "not found")

    def __init__(self, options: BackendOptions | None = None, *, timeout: float | None = None):
        super().__init__(options, timeout=timeout)
        if not self.options.vault_name:
            raise ValidationError("Azure Key Vault backend requires --vault-name option.")

    @property
    def vault_name(self) -> str:
        return self.options.vault_name or ""

    def get(self, key: str) -> str | None:
        try:
            out = self._run(
                ["keyvault", "secret", "show", "--vault-name", self.vault_name,
                 "--name", self.prefixed_key(key), "--query", "value", "--output", "tsv"]
            )
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        return out.strip() or None

    def set(self, key: str, value: str) -> None:
        try:
            self._run(
                ["keyvault", "secret", "set", "--vault-name", self.vault_name,
                 "--name", self.prefixed_key(key), "--value", value]
            )
        except CommandError as e:
            raise self._error("set", e, key) from e

    def delete(self, key: str) -> None:
        try:
            self._run(
                ["keyvault", "secret", "delete", "--vault-name", self.vault_name,
                 "--name", self.prefixed_key(key)]
            )
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            out = self._run(
                ["keyvault", "secret", "list", "--vault-name", self.vault_name,
                 "--query", "[].name", "--output", "json"]
            )
            names = json.loads(out) or []
        except CommandError as e:
            raise self._error("list", e) from e
        except ValueError as e:
            raise BackendOperationError("azure list returned invalid JSON") from e
        return self.strip_prefix(names, "openclaw-")

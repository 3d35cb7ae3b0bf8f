"""HashiCorp Vault backend via the vault CLI.

Secrets live at secret/openclaw/<key> (kv v2) in a field named "value".
"""

from __future__ import annotations

import json

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.errors import BackendOperationError, CommandError

_MOUNT = "secret/openclaw"


class VaultBackend(CliBackend):
    name = "vault"
    cli = "vault"
    version_args = ("version",)
    not_found_markers = ("No value found", "not found", "no secrets")

    def _env(self) -> dict[str, str] | None:
        return {"VAULT_ADDR": self.options.addr} if self.options.addr else None

    def get(self, key: str) -> str | None:
        try:
            out = self._run(["kv", "get", "-field=value", f"{_MOUNT}/{key}"], env=self._env())
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        return out.strip() or None

    def set(self, key: str, value: str) -> None:
        # "value=-" makes the CLI read the value from stdin, keeping it out of argv
        try:
            self._run(["kv", "put", f"{_MOUNT}/{key}", "value=-"], input=value, env=self._env())
        except CommandError as e:
            raise self._error("set", e, key) from e

    def delete(self, key: str) -> None:
        try:
            self._run(["kv", "delete", f"{_MOUNT}/{key}"], env=self._env())
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            out = self._run(["kv", "list", "-format=json", f"{_MOUNT}/"], env=self._env())
        except CommandError as e:
            if self._is_not_found(e):
                return []
            raise self._error("list", e) from e
        try:
            return [name.rstrip("/") for name in json.loads(out)]
        except ValueError as e:
            raise BackendOperationError("vault list returned invalid JSON") from e

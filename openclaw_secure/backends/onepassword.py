"""1Password backend via the op CLI."""

from __future__ import annotations

import json

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.errors import BackendOperationError, CommandError


class OnePasswordBackend(CliBackend):
    name = "1password"
    cli = "op"
    not_found_markers = ("not found", "isn't an item")

    def _vault_args(self) -> list[str]:
        return ["--vault", self.options.vault] if self.options.vault else []

    def get(self, key: str) -> str | None:
        title = self.prefixed_key(key)
        try:
            out = self._run(
                ["item", "get", title, "--fields", "password", "--format", "json",
                 *self._vault_args()]
            )
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        try:
            return json.loads(out).get("value")
        except (ValueError, AttributeError) as e:
            raise BackendOperationError(
                f'1password get returned unexpected output for "{key}"'
            ) from e

    def set(self, key: str, value: str) -> None:
        title = self.prefixed_key(key)
        try:
            self._run(["item", "edit", title, f"password={value}", *self._vault_args()])
            return
        except CommandError as e:
            if not self._is_not_found(e):
                raise self._error("set", e, key) from e
        try:
            self._run(
                [
                    "item", "create", "--category", "password", "--title", title,
                    f"password={value}", *self._vault_args(),
                ]
            )
        except CommandError as e:
            raise self._error("create", e, key) from e

    def delete(self, key: str) -> None:
        try:
            self._run(["item", "delete", self.prefixed_key(key), *self._vault_args()])
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            out = self._run(["item", "list", "--format", "json", *self._vault_args()])
            items = json.loads(out)
        except CommandError as e:
            raise self._error("list", e) from e
        except ValueError as e:
            raise BackendOperationError("1password list returned invalid JSON") from e
        return self.strip_prefix([item.get("title", "") for item in items], "openclaw-")

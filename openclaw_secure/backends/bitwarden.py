"""Bitwarden backend via the bw CLI.

Values live in the password field of a login item named ``openclaw-<key>``.
"""

from __future__ import annotations

import base64
import json

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.errors import BackendOperationError, CommandError


def _encode(item: dict) -> str:
    return base64.b64encode(json.dumps(item).encode("utf-8")).decode("ascii")


class BitwardenBackend(CliBackend):
    name = "bitwarden"
    cli = "bw"
    not_found_markers = ("Not found",)

    def _get_item(self, key: str) -> dict | None:
        try:
            out = self._run(["get", "item", self.prefixed_key(key), "--raw"])
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        try:
            return json.loads(out)
        except ValueError as e:
            raise BackendOperationError(f'bitwarden get returned invalid JSON for "{key}"') from e

    def get(self, key: str) -> str | None:
        item = self._get_item(key)
        if item is None:
            return None
        return (item.get("login") or {}).get("password")

    def set(self, key: str, value: str) -> None:
        item = self._get_item(key)
        try:
            if item is not None:
                item["login"] = {**(item.get("login") or {}), "password": value}
                self._run(["edit", "item", item["id"]], input=_encode(item))
            else:
                new_item = {"type": 1, "name": self.prefixed_key(key), "login": {"password": value}}
                self._run(["create", "item", _encode(new_item)])
        except CommandError as e:
            raise self._error("set", e, key) from e

    def delete(self, key: str) -> None:
        item = self._get_item(key)
        if item is None:
            return
        try:
            self._run(["delete", "item", item["id"]])
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            items = json.loads(self._run(["list", "items", "--search", "openclaw-"]))
        except CommandError as e:
            raise self._error("list", e) from e
        except ValueError as e:
            raise BackendOperationError("bitwarden list returned invalid JSON") from e
        return self.strip_prefix([item.get("name", "") for item in items], "openclaw-")

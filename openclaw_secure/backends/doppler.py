"""Doppler backend via the doppler CLI.

Doppler names are UPPER_SNAKE_CASE, so "telegram-bot-token" is stored as
"OPENCLAW_TELEGRAM_BOT_TOKEN".
"""

from __future__ import annotations

import json

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.errors import BackendOperationError, CommandError

_PREFIX = "OPENCLAW_"


def doppler_key(key: str) -> str:
    return _PREFIX + key.upper().replace("-", "_")


class DopplerBackend(CliBackend):
    name = "doppler"
    cli = "doppler"
    not_found_markers = ("ould not find", "not found")

    def _project_args(self) -> list[str]:
        args: list[str] = []
        if self.options.doppler_project:
            args += ["--project", self.options.doppler_project]
        if self.options.doppler_config:
            args += ["--config", self.options.doppler_config]
        return args

    def get(self, key: str) -> str | None:
        try:
            out = self._run(["secrets", "get", doppler_key(key), "--plain", *self._project_args()])
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        return out.strip() or None

    def set(self, key: str, value: str) -> None:
        try:
            self._run(
                ["secrets", "set", doppler_key(key), "--raw", *self._project_args()], input=value
            )
        except CommandError as e:
            raise self._error("set", e, key) from e

    def delete(self, key: str) -> None:
        try:
            self._run(["secrets", "delete", doppler_key(key), "--yes", *self._project_args()])
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            secrets = json.loads(self._run(["secrets", "--json", *self._project_args()]))
        except CommandError as e:
            raise self._error("list", e) from e
        except ValueError as e:
            raise BackendOperationError("doppler list returned invalid JSON") from e
        return [
            name[len(_PREFIX):].lower().replace("_", "-")
            for name in secrets
            if name.startswith(_PREFIX)
        ]

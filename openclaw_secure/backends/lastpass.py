"""LastPass backend via the lpass CLI."""

from __future__ import annotations

import re

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.errors import CommandError

_ENTRY_RE = re.compile(r"openclaw/([^\s\[]+)")


class LastPassBackend(CliBackend):
    name = "lastpass"
    cli = "lpass"
    not_found_markers = ("Could not find", "not found")

    def get(self, key: str) -> str | None:
        try:
            out = self._run(["show", "--password", self.prefixed_path(key)])
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        return out.strip() or None

    def set(self, key: str, value: str) -> None:
        action = "edit" if self.get(key) is not None else "add"
        try:
            self._run([action, "--non-interactive", "--pass", self.prefixed_path(key)], input=value)
        except CommandError as e:
            raise self._error("set", e, key) from e

    def delete(self, key: str) -> None:
        try:
            self._run(["rm", self.prefixed_path(key)])
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            out = self._run(["ls", "openclaw/"])
        except CommandError as e:
            raise self._error("list", e) from e
        return [m.group(1) for line in out.splitlines() if (m := _ENTRY_RE.search(line))]

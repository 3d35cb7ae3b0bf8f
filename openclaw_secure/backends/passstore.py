"""pass (the standard Unix password manager) backend."""

from __future__ import annotations

import re

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.errors import CommandError

# tree(1) drawing characters printed by `pass ls`
_TREE_CHARS = re.compile(r"[─│└├┤\s]")


class PassBackend(CliBackend):
    name = "pass"
    cli = "pass"
    version_args = ("version",)
    not_found_markers = ("not in the password store", "is not in")

    def get(self, key: str) -> str | None:
        try:
            out = self._run(["show", self.prefixed_path(key)])
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        return out.split("\n", 1)[0] or None

    def set(self, key: str, value: str) -> None:
        try:
            self._run(["insert", "--force", "--multiline", self.prefixed_path(key)], input=value)
        except CommandError as e:
            raise self._error("set", e, key) from e

    def delete(self, key: str) -> None:
        try:
            self._run(["rm", "--force", self.prefixed_path(key)])
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            out = self._run(["ls", "openclaw/"])
        except CommandError as e:
            if self._is_not_found(e):
                return []
            raise self._error("list", e) from e
        names = (_TREE_CHARS.sub("", line) for line in out.splitlines())
        return [name for name in names if name and "openclaw" not in name]

"""macOS Keychain backend via /usr/bin/security."""

from __future__ import annotations

import re
import sys

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.constants import KEYCHAIN_ACCOUNT, SERVICE_PREFIX
from openclaw_secure.errors import BackendUnavailableError, CommandError

_SERVICE_RE = re.compile(r'"svce"<blob>="([^"]+)"')


class KeychainBackend(CliBackend):
    name = "keychain"
    cli = "/usr/bin/security"
    not_found_markers = ("could not be found", "SecItemNotFound", "errSecItemNotFound")

    def available(self) -> bool:
        return sys.platform == "darwin"

    def _require_macos(self) -> None:
        if not self.available():
            raise BackendUnavailableError(self.name, "The keychain backend requires macOS.")

    def get(self, key: str) -> str | None:
        self._require_macos()
        service = self.prefixed_key(key)
        try:
            out = self._run(["find-generic-password", "-s", service, "-a", KEYCHAIN_ACCOUNT, "-w"])
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("read", e, key) from e
        return out.strip()

    def set(self, key: str, value: str) -> None:
        self._require_macos()
        self.delete(key)
        service = self.prefixed_key(key)
        try:
            self._run(
                ["add-generic-password", "-s", service, "-a", KEYCHAIN_ACCOUNT, "-w", value, "-U"]
            )
        except CommandError as e:
            raise self._error("write", e, key) from e

    def delete(self, key: str) -> None:
        self._require_macos()
        service = self.prefixed_key(key)
        try:
            self._run(["delete-generic-password", "-s", service, "-a", KEYCHAIN_ACCOUNT])
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        self._require_macos()
        try:
            out = self._run(["dump-keychain"], timeout=30)
        except CommandError as e:
            raise self._error("list", e) from e
        return self.strip_prefix(_SERVICE_RE.findall(out), f"{SERVICE_PREFIX}-")

"""Google Cloud Secret Manager backend via the gcloud CLI."""

from __future__ import annotations

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.errors import CommandError


class GCloudSecretsBackend(CliBackend):
    name = "gcloud"
    cli = "gcloud"
    not_found_markers = ("NOT_FOUND", "not found")

    def _project_args(self) -> list[str]:
        return ["--project", self.options.project] if self.options.project else []

    def get(self, key: str) -> str | None:
        try:
            out = self._run(
                ["secrets", "versions", "access", "latest",
                 f"--secret={self.prefixed_key(key)}", *self._project_args()]
            )
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        return out or None

    def set(self, key: str, value: str) -> None:
        name = self.prefixed_key(key)
        try:
            self._run(
                ["secrets", "create", name, "--replication-policy=automatic", *self._project_args()]
            )
        except CommandError as e:
            if "ALREADY_EXISTS" not in e.output and "already exists" not in e.output:
                raise self._error("create", e, key) from e
        try:
            self._run(
                ["secrets", "versions", "add", name, "--data-file=-", *self._project_args()],
                input=value,
            )
        except CommandError as e:
            raise self._error("set", e, key) from e

    def delete(self, key: str) -> None:
        try:
            self._run(
                ["secrets", "delete", self.prefixed_key(key), "--quiet", *self._project_args()]
            )
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            out = self._run(["secrets", "list", "--format=value(name)", *self._project_args()])
        except CommandError as e:
            raise self._error("list", e) from e
        return self.strip_prefix(out.split(), "openclaw-")

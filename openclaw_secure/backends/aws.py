"""AWS Secrets Manager backend via the aws CLI."""

from __future__ import annotations

import json

from openclaw_secure.backends.base import CliBackend
from openclaw_secure.errors import BackendOperationError, CommandError


class AwsSecretsBackend(CliBackend):
    name = "aws"
    cli = "aws"
    not_found_markers = ("ResourceNotFoundException", "not found")

    def _region_args(self) -> list[str]:
        return ["--region", self.options.region] if self.options.region else []

    def get(self, key: str) -> str | None:
        try:
            out = self._run(
                [
                    "secretsmanager", "get-secret-value", "--secret-id", self.prefixed_path(key),
                    "--query", "SecretString", "--output", "text", *self._region_args(),
                ]
            )
        except CommandError as e:
            if self._is_not_found(e):
                return None
            raise self._error("get", e, key) from e
        return out.strip() or None

    def set(self, key: str, value: str) -> None:
        name = self.prefixed_path(key)
        try:
            self._run(
                ["secretsmanager", "update-secret", "--secret-id", name,
                 "--secret-string", value, *self._region_args()]
            )
            return
        except CommandError as e:
            if not self._is_not_found(e):
                raise self._error("set", e, key) from e
        try:
            self._run(
                ["secretsmanager", "create-secret", "--name", name,
                 "--secret-string", value, *self._region_args()]
            )
        except CommandError as e:
            raise self._error("create", e, key) from e

    def delete(self, key: str) -> None:
        try:
            self._run(
                ["secretsmanager", "delete-secret", "--secret-id", self.prefixed_path(key),
                 "--force-delete-without-recovery", *self._region_args()]
            )
        except CommandError as e:
            if self._is_not_found(e):
                return
            raise self._error("delete", e, key) from e

    def list(self) -> list[str]:
        try:
            out = self._run(
                ["secretsmanager", "list-secrets", "--query", "SecretList[].Name",
                 "--output", "json", *self._region_args()]
            )
            names = json.loads(out) or []
        except CommandError as e:
            raise self._error("list", e) from e
        except ValueError as e:
            raise BackendOperationError("aws list returned invalid JSON") from e
        return self.strip_prefix(names, "openclaw/")

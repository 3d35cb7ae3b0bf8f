"""Backend capability and the shared plumbing for CLI-driven backends."""

from __future__ import annotations

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from openclaw_secure.constants import SERVICE_PREFIX
from openclaw_secure.errors import BackendOperationError, CommandError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 15.0


@dataclass(frozen=True)
class BackendOptions:
    """Vendor-specific settings. Each backend reads only the ones it needs."""

    vault: str | None = None
    region: str | None = None
    project: str | None = None
    vault_name: str | None = None
    addr: str | None = None
    doppler_project: str | None = None
    doppler_config: str | None = None


class SecretBackend(ABC):
    """Where secret values live while the config only holds placeholders.

    ``get`` returns None for an unknown key. Any other failure raises
    ``BackendOperationError`` so callers can tell "absent" from "unknown".
    """

    name: str = ""

    @abstractmethod
    def available(self) -> bool: ...

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting an absent key is not an error."""

    @abstractmethod
    def list(self) -> list[str]:
        """Key names managed under the openclaw namespace."""


def run_command(
    cmd: str,
    args: Sequence[str],
    *,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
    input: str | None = None,
    env: dict[str, str] | None = None,
) -> str:
    """Run a vendor CLI and return its stdout. Raises CommandError on failure."""
    full_env = {**os.environ, **env} if env else None
    try:
        proc = subprocess.run(
            [cmd, *args],
            input=input,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=full_env,
        )
    except FileNotFoundError:
        raise CommandError(cmd, None, f"{cmd}: command not found") from None
    except subprocess.TimeoutExpired:
        raise CommandError(cmd, None, f"{cmd} timed out after {timeout}s") from None

    if proc.returncode != 0:
        output = (proc.stderr or "").strip() or (proc.stdout or "").strip()
        raise CommandError(cmd, proc.returncode, output)
    return proc.stdout


def check_cli_available(cmd: str, args: Sequence[str] = ("--version",)) -> bool:
    """True if ``cmd`` runs and exits zero."""
    try:
        run_command(cmd, args, timeout=5)
        return True
    except CommandError:
        return False


class CliBackend(SecretBackend):
    """A backend that forwards every call to a vendor command-line tool."""

    cli: str = ""
    version_args: tuple[str, ...] = ("--version",)
    # Substrings of CLI error output that mean "no such key"
    not_found_markers: tuple[str, ...] = ("not found",)

    def __init__(self, options: BackendOptions | None = None, *, timeout: float | None = None):
        self.options = options or BackendOptions()
        self.timeout = timeout or DEFAULT_COMMAND_TIMEOUT

    def available(self) -> bool:
        return check_cli_available(self.cli, self.version_args)

    def _run(
        self,
        args: Sequence[str],
        *,
        input: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> str:
        return run_command(
            self.cli, args, timeout=timeout or self.timeout, input=input, env=env
        )

    def _is_not_found(self, err: CommandError) -> bool:
        # a CLI that never ran or exited (missing, timed out) says nothing about the key
        if err.returncode is None:
            return False
        return any(marker in err.output for marker in self.not_found_markers)

    def _error(
        self, action: str, err: CommandError, key: str | None = None
    ) -> BackendOperationError:
        target = f' for "{key}"' if key is not None else ""
        logger.debug("%s %s failed%s (exit %s)", self.name, action, target, err.returncode)
        return BackendOperationError(f"{self.name} {action} failed{target}: {err.output}")

    def prefixed_key(self, key: str) -> str:
        return f"{SERVICE_PREFIX}-{key}"

    def prefixed_path(self, key: str) -> str:
        return f"{SERVICE_PREFIX}/{key}"

    def strip_prefix(self, names: Sequence[str], prefix: str) -> list[str]:
        return [name[len(prefix):] for name in names if name.startswith(prefix)]

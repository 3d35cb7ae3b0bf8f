"""Error types raised by openclaw-secure.

Every error is fatal to the current invocation. Nothing here is retried;
the vendor CLIs are expected to handle their own transient failures.
"""

from __future__ import annotations


class OpenclawSecureError(Exception):
    """Base class for all openclaw-secure errors."""


class NotFoundError(OpenclawSecureError):
    """A required file or executable does not exist."""


class ParseError(OpenclawSecureError):
    """The config document is not valid JSON (or not a JSON object)."""


class ValidationError(OpenclawSecureError):
    """Invalid options, e.g. a backend missing a required setting."""


class KeyNameCollisionError(ValidationError):
    """Two config paths in one secret map derive the same backend key name."""

    def __init__(self, key_name: str, paths: list[str]):
        self.key_name = key_name
        self.paths = paths
        super().__init__(
            f"Backend key name '{key_name}' is derived from more than one path: "
            f"{', '.join(paths)}. Exclude one of them with --exclude."
        )


class BackendUnavailableError(OpenclawSecureError):
    """The backend's CLI or session is not usable on this system."""

    def __init__(self, backend: str, hint: str = ""):
        self.backend = backend
        self.hint = hint
        message = f'Backend "{backend}" is not available on this system.'
        if hint:
            message += f"\n  {hint}"
        super().__init__(message)


class BackendOperationError(OpenclawSecureError):
    """A backend call failed for a reason other than "key not found"."""


class CommandError(OpenclawSecureError):
    """A vendor CLI exited non-zero, timed out, or could not be executed."""

    def __init__(self, cmd: str, returncode: int | None, output: str):
        self.cmd = cmd
        self.returncode = returncode
        self.output = output
        super().__init__(output or f"{cmd} exited with status {returncode}")

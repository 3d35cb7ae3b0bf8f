"""Secure gateway start: restore secrets, launch the gateway, scrub again.

The gateway reads openclaw.json once at startup, so the plaintext values only
need to be on disk until it reports healthy. SIGINT/SIGTERM during the
window trigger a best-effort scrub before exiting.
"""

from __future__ import annotations

import logging
import shlex
import signal
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

import httpx

from openclaw_secure.backends.base import SecretBackend
from openclaw_secure.constants import (
    DEFAULT_GATEWAY_COMMAND,
    DEFAULT_HEALTH_URL,
    DEFAULT_TIMEOUT_MS,
    LEGACY_KEY_NAMES,
)
from openclaw_secure.errors import NotFoundError, OpenclawSecureError
from openclaw_secure.lifecycle import migrate_keys, restore_keys, scrub_keys
from openclaw_secure.models import SecretEntry

logger = logging.getLogger(__name__)

FIRST_PROBE_DELAY = 1.0
PROBE_INTERVAL = 0.5


@dataclass
class StartResult:
    pid: int
    migrated: int
    restored: int
    healthy: bool
    scrubbed: int


def wait_for_gateway(
    health_url: str = DEFAULT_HEALTH_URL,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> bool:
    """Poll the health endpoint until it returns 200. False on timeout."""
    deadline = time.monotonic() + timeout_ms / 1000
    time.sleep(FIRST_PROBE_DELAY)
    while time.monotonic() <= deadline:
        try:
            resp = httpx.get(health_url, timeout=2)
            if resp.status_code == 200:
                return True
        except httpx.HTTPError as e:
            logger.debug("Gateway health probe failed: %s", e)
        time.sleep(PROBE_INTERVAL)
    return False


def spawn_gateway(command: str = DEFAULT_GATEWAY_COMMAND) -> int:
    """Start the gateway detached from this process. Returns its PID."""
    argv = shlex.split(command)
    try:
        proc = subprocess.Popen(argv, start_new_session=True)
    except FileNotFoundError:
        raise NotFoundError(f"Gateway command not found: {argv[0]}") from None
    return proc.pid


class SecureStart:
    """Run the restore -> launch -> scrub sequence for one gateway start."""

    def __init__(
        self,
        config_path: str | Path,
        secret_map: list[SecretEntry],
        backend: SecretBackend,
        *,
        gateway_command: str = DEFAULT_GATEWAY_COMMAND,
        health_url: str = DEFAULT_HEALTH_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        legacy_names: dict[str, str] | None = None,
    ):
        self.config_path = config_path
        self.secret_map = secret_map
        self.backend = backend
        self.gateway_command = gateway_command
        self.health_url = health_url
        self.timeout_ms = timeout_ms
        self.legacy_names = LEGACY_KEY_NAMES if legacy_names is None else legacy_names

    def cleanup(self) -> None:
        """Best-effort scrub; used on signals and after failures."""
        try:
            scrub_keys(self.config_path, self.secret_map)
        except OpenclawSecureError as e:
            logger.warning("Cleanup scrub failed: %s", e)

    def _on_signal(self, signum, frame):
        logger.warning("Received signal %s, scrubbing config before exit", signum)
        self.cleanup()
        raise SystemExit(1)

    def run(self) -> StartResult:
        previous = {
            sig: signal.signal(sig, self._on_signal) for sig in (signal.SIGINT, signal.SIGTERM)
        }
        try:
            migrated = 0
            if self.legacy_names:
                results = migrate_keys(self.backend, self.legacy_names)
                migrated = sum(1 for r in results if r.migrated)
                if migrated:
                    print(f"  + Migrated {migrated} legacy key(s)")

            print(f"  -> Restoring keys from {self.backend.name}...")
            restored = restore_keys(self.config_path, self.secret_map, self.backend)
            print("  + Config populated with real keys")

            try:
                print("  -> Starting gateway...")
                pid = spawn_gateway(self.gateway_command)
                print(f"  -> Waiting for gateway health ({self.timeout_ms}ms timeout)...")
                healthy = wait_for_gateway(self.health_url, self.timeout_ms)
                if healthy:
                    print("  + Gateway is healthy")
                else:
                    print("  ! Health check timed out, scrubbing anyway")
            except BaseException:
                self.cleanup()
                raise

            print("  -> Scrubbing config...")
            scrubbed = scrub_keys(self.config_path, self.secret_map)
            print("  + Config scrubbed, secrets removed")
            return StartResult(
                pid=pid,
                migrated=migrated,
                restored=len(restored),
                healthy=healthy,
                scrubbed=scrubbed,
            )
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

"""Patch the gateway's macOS LaunchAgent so boot goes through ``openclaw-secure start``.

``install_secure`` backs up the plist to ``.bak`` and rewrites its
ProgramArguments; ``uninstall_secure`` puts the backup back (or rebuilds the
original arguments when no backup exists).
"""

from __future__ import annotations

import logging
import plistlib
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from openclaw_secure.errors import NotFoundError, OpenclawSecureError, ParseError

logger = logging.getLogger(__name__)

PLIST_FILENAME = "com.clawdbot.gateway.plist"
LAUNCH_AGENTS_DIR = Path.home() / "Library" / "LaunchAgents"


@dataclass
class PlistConfig:
    label: str
    program_arguments: list[str]
    environment_variables: dict[str, str] = field(default_factory=dict)
    keep_alive: bool = False
    run_at_load: bool = False
    # everything else in the plist, written back untouched
    extra: dict = field(default_factory=dict)


@dataclass
class InstallResult:
    plist_path: Path
    backup_path: Path
    old_args: list[str]
    new_args: list[str]


@dataclass
class UninstallResult:
    plist_path: Path
    restored_from: str  # "backup" or "reconstructed"
    old_args: list[str]
    new_args: list[str]


def find_plist(launch_agents_dir: Path | None = None) -> Path:
    path = (launch_agents_dir or LAUNCH_AGENTS_DIR) / PLIST_FILENAME
    if not path.exists():
        raise NotFoundError(
            f"Clawdbot LaunchAgent not found. Is Clawdbot installed?\n  Expected: {path}"
        )
    return path


def read_plist(path: Path) -> PlistConfig:
    try:
        with path.open("rb") as f:
            data = plistlib.load(f)
    except (plistlib.InvalidFileException, ValueError) as e:
        raise ParseError(f"Cannot parse LaunchAgent {path}: {e}") from e
    known = {"Label", "ProgramArguments", "EnvironmentVariables", "KeepAlive", "RunAtLoad"}
    return PlistConfig(
        label=data.get("Label", ""),
        program_arguments=list(data.get("ProgramArguments", [])),
        environment_variables=dict(data.get("EnvironmentVariables", {})),
        keep_alive=bool(data.get("KeepAlive", False)),
        run_at_load=bool(data.get("RunAtLoad", False)),
        extra={k: v for k, v in data.items() if k not in known},
    )


def write_plist(path: Path, config: PlistConfig) -> None:
    data: dict = {"Label": config.label, "ProgramArguments": config.program_arguments}
    if config.environment_variables:
        data["EnvironmentVariables"] = config.environment_variables
    data["KeepAlive"] = config.keep_alive
    data["RunAtLoad"] = config.run_at_load
    data.update(config.extra)
    with path.open("wb") as f:
        plistlib.dump(data, f)


def backup_plist(path: Path) -> Path:
    backup_path = path.with_name(path.name + ".bak")
    shutil.copy2(path, backup_path)
    return backup_path


def resolve_secure_binary() -> str:
    path = shutil.which("openclaw-secure")
    if not path:
        raise NotFoundError(
            "Cannot find the openclaw-secure executable on PATH.\n"
            "  Run: pip install openclaw-secure"
        )
    return path


def reload_launch_agent(plist_path: Path) -> None:
    # unload fails when the agent is not loaded; that is fine
    subprocess.run(["launchctl", "unload", str(plist_path)], capture_output=True)
    proc = subprocess.run(
        ["launchctl", "load", str(plist_path)], capture_output=True, text=True
    )
    if proc.returncode != 0:
        raise OpenclawSecureError(f"launchctl load failed: {proc.stderr.strip()}")


def install_secure(
    backend: str | None = None,
    *,
    dry_run: bool = False,
    launch_agents_dir: Path | None = None,
) -> InstallResult:
    """Point the LaunchAgent at ``openclaw-secure start``."""
    plist_path = find_plist(launch_agents_dir)
    config = read_plist(plist_path)
    old_args = list(config.program_arguments)

    new_args = [resolve_secure_binary(), "start"]
    if backend:
        new_args += ["--backend", backend]

    backup_path = plist_path.with_name(plist_path.name + ".bak")
    already_patched = any(Path(arg).name == "openclaw-secure" for arg in old_args)
    # re-installing must not overwrite the original plist's backup
    if not (already_patched and backup_path.exists()):
        backup_path = backup_plist(plist_path)
    config.program_arguments = new_args
    write_plist(plist_path, config)
    logger.info("Patched %s (backup at %s)", plist_path, backup_path)

    if not dry_run:
        reload_launch_agent(plist_path)
    return InstallResult(plist_path, backup_path, old_args, new_args)


def uninstall_secure(
    *,
    dry_run: bool = False,
    launch_agents_dir: Path | None = None,
) -> UninstallResult:
    """Restore the LaunchAgent to start the gateway directly."""
    plist_path = find_plist(launch_agents_dir)
    config = read_plist(plist_path)
    old_args = list(config.program_arguments)
    backup_path = plist_path.with_name(plist_path.name + ".bak")

    if backup_path.exists():
        shutil.copy2(backup_path, plist_path)
        new_args = read_plist(plist_path).program_arguments
        restored_from = "backup"
    else:
        clawdbot = shutil.which("clawdbot")
        if not clawdbot:
            raise NotFoundError(
                "Cannot find clawdbot binary and no backup exists.\n"
                "  Cannot reconstruct the original LaunchAgent."
            )
        new_args = [clawdbot, "gateway", "start"]
        config.program_arguments = new_args
        write_plist(plist_path, config)
        restored_from = "reconstructed"

    if not dry_run:
        reload_launch_agent(plist_path)
    return UninstallResult(plist_path, restored_from, old_args, new_args)

"""Tests for patching the gateway LaunchAgent plist."""

from __future__ import annotations

import plistlib
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from openclaw_secure.errors import NotFoundError, OpenclawSecureError, ParseError
from openclaw_secure.launchagent import (
    PLIST_FILENAME,
    find_plist,
    install_secure,
    read_plist,
    reload_launch_agent,
    uninstall_secure,
)

ORIGINAL_ARGS = ["/usr/local/bin/clawdbot", "gateway", "start"]
SECURE_BIN = "/usr/local/bin/openclaw-secure"


@pytest.fixture
def agents_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "LaunchAgents"
    directory.mkdir()
    with (directory / PLIST_FILENAME).open("wb") as f:
        plistlib.dump(
            {
                "Label": "com.clawdbot.gateway",
                "ProgramArguments": ORIGINAL_ARGS,
                "EnvironmentVariables": {"PATH": "/usr/local/bin:/usr/bin"},
                "KeepAlive": True,
                "RunAtLoad": True,
                "StandardOutPath": "/tmp/clawdbot.log",
            },
            f,
        )
    return directory


def _load(path: Path) -> dict:
    with path.open("rb") as f:
        return plistlib.load(f)


def _which(name: str) -> str | None:
    return {"openclaw-secure": SECURE_BIN, "clawdbot": "/opt/bin/clawdbot"}.get(name)


class TestReadPlist:
    def test_fields(self, agents_dir: Path):
        config = read_plist(agents_dir / PLIST_FILENAME)

        assert config.label == "com.clawdbot.gateway"
        assert config.program_arguments == ORIGINAL_ARGS
        assert config.environment_variables == {"PATH": "/usr/local/bin:/usr/bin"}
        assert config.keep_alive is True
        assert config.extra == {"StandardOutPath": "/tmp/clawdbot.log"}

    def test_garbage(self, tmp_path: Path):
        path = tmp_path / "bad.plist"
        path.write_bytes(b"not a plist")

        with pytest.raises(ParseError):
            read_plist(path)

    def test_find_missing(self, tmp_path: Path):
        with pytest.raises(NotFoundError, match="Is Clawdbot installed"):
            find_plist(tmp_path)


@patch("openclaw_secure.launchagent.shutil.which", side_effect=_which)
class TestInstall:
    def test_patches_program_arguments(self, mock_which, agents_dir: Path):
        result = install_secure(dry_run=True, launch_agents_dir=agents_dir)

        plist = _load(agents_dir / PLIST_FILENAME)
        assert plist["ProgramArguments"] == [SECURE_BIN, "start"]
        assert plist["StandardOutPath"] == "/tmp/clawdbot.log"
        assert plist["KeepAlive"] is True
        assert result.old_args == ORIGINAL_ARGS
        assert result.new_args == [SECURE_BIN, "start"]

    def test_backend_argument(self, mock_which, agents_dir: Path):
        result = install_secure("bitwarden", dry_run=True, launch_agents_dir=agents_dir)

        assert result.new_args == [SECURE_BIN, "start", "--backend", "bitwarden"]

    def test_backs_up_original(self, mock_which, agents_dir: Path):
        result = install_secure(dry_run=True, launch_agents_dir=agents_dir)

        assert _load(result.backup_path)["ProgramArguments"] == ORIGINAL_ARGS

    def test_reinstall_keeps_original_backup(self, mock_which, agents_dir: Path):
        install_secure(dry_run=True, launch_agents_dir=agents_dir)
        result = install_secure("aws", dry_run=True, launch_agents_dir=agents_dir)

        assert _load(result.backup_path)["ProgramArguments"] == ORIGINAL_ARGS

    def test_reloads_launchd(self, mock_which, agents_dir: Path):
        with patch("openclaw_secure.launchagent.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stderr="")
            install_secure(launch_agents_dir=agents_dir)

        commands = [c.args[0][:2] for c in mock_run.call_args_list]
        assert commands == [["launchctl", "unload"], ["launchctl", "load"]]

    def test_missing_binary(self, mock_which, agents_dir: Path):
        mock_which.side_effect = lambda name: None

        with pytest.raises(NotFoundError, match="openclaw-secure"):
            install_secure(dry_run=True, launch_agents_dir=agents_dir)
        assert _load(agents_dir / PLIST_FILENAME)["ProgramArguments"] == ORIGINAL_ARGS


@patch("openclaw_secure.launchagent.shutil.which", side_effect=_which)
class TestUninstall:
    def test_restores_backup(self, mock_which, agents_dir: Path):
        install_secure(dry_run=True, launch_agents_dir=agents_dir)

        result = uninstall_secure(dry_run=True, launch_agents_dir=agents_dir)

        assert result.restored_from == "backup"
        assert result.old_args == [SECURE_BIN, "start"]
        assert _load(agents_dir / PLIST_FILENAME)["ProgramArguments"] == ORIGINAL_ARGS

    def test_reconstructs_without_backup(self, mock_which, agents_dir: Path):
        result = uninstall_secure(dry_run=True, launch_agents_dir=agents_dir)

        assert result.restored_from == "reconstructed"
        assert result.new_args == ["/opt/bin/clawdbot", "gateway", "start"]
        assert _load(agents_dir / PLIST_FILENAME)["ProgramArguments"] == result.new_args

    def test_no_backup_and_no_clawdbot(self, mock_which, agents_dir: Path):
        mock_which.side_effect = lambda name: None

        with pytest.raises(NotFoundError, match="no backup"):
            uninstall_secure(dry_run=True, launch_agents_dir=agents_dir)


class TestReloadLaunchAgent:
    @patch("openclaw_secure.launchagent.subprocess.run")
    def test_load_failure(self, mock_run, tmp_path: Path):
        mock_run.side_effect = [
            MagicMock(returncode=1, stderr="not loaded"),
            MagicMock(returncode=5, stderr="Load failed: 5: Input/output error\n"),
        ]

        with pytest.raises(OpenclawSecureError, match="Input/output error"):
            reload_launch_agent(tmp_path / PLIST_FILENAME)

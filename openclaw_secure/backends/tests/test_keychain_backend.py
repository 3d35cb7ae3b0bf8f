"""Tests for the macOS Keychain backend."""

from __future__ import annotations

import pytest

from openclaw_secure.backends.keychain import KeychainBackend
from openclaw_secure.errors import BackendOperationError, BackendUnavailableError

NOT_FOUND = "security: SecKeychainSearchCopyNext: The specified item could not be found in the keychain."


@pytest.fixture
def macos(monkeypatch):
    monkeypatch.setattr("sys.platform", "darwin")


class TestAvailability:
    def test_not_macos(self, monkeypatch, mock_run):
        monkeypatch.setattr("sys.platform", "linux")
        backend = KeychainBackend()

        assert backend.available() is False
        with pytest.raises(BackendUnavailableError):
            backend.get("telegram-bot-token")
        mock_run.assert_not_called()


@pytest.mark.usefixtures("macos")
class TestKeychainBackend:
    def test_get(self, mock_run, proc):
        mock_run.return_value = proc("real-token\n")

        assert KeychainBackend().get("telegram-bot-token") == "real-token"
        assert mock_run.call_args.args[0] == [
            "/usr/bin/security", "find-generic-password",
            "-s", "openclaw-telegram-bot-token", "-a", "openclaw", "-w",
        ]

    def test_get_missing(self, mock_run, proc):
        mock_run.return_value = proc(returncode=44, stderr=NOT_FOUND)

        assert KeychainBackend().get("telegram-bot-token") is None

    def test_get_other_failure_is_not_absent(self, mock_run, proc):
        mock_run.return_value = proc(returncode=51, stderr="User interaction is not allowed.")

        with pytest.raises(BackendOperationError, match="interaction"):
            KeychainBackend().get("telegram-bot-token")

    def test_set_replaces_existing(self, mock_run, proc, argvs):
        mock_run.side_effect = [proc(returncode=44, stderr=NOT_FOUND), proc()]

        KeychainBackend().set("gateway-auth-token", "tok")

        delete, add = argvs()
        assert delete[1] == "delete-generic-password"
        assert add == [
            "/usr/bin/security", "add-generic-password",
            "-s", "openclaw-gateway-auth-token", "-a", "openclaw", "-w", "tok", "-U",
        ]

    def test_set_failure(self, mock_run, proc):
        mock_run.side_effect = [proc(), proc(returncode=1, stderr="keychain locked")]

        with pytest.raises(BackendOperationError, match="keychain locked"):
            KeychainBackend().set("gateway-auth-token", "tok")

    def test_delete_missing_is_ok(self, mock_run, proc):
        mock_run.return_value = proc(returncode=44, stderr=NOT_FOUND)

        KeychainBackend().delete("gateway-auth-token")

    def test_list(self, mock_run, proc):
        mock_run.return_value = proc(
            'keychain: "/Users/me/Library/Keychains/login.keychain-db"\n'
            '    "svce"<blob>="openclaw-telegram-bot-token"\n'
            '    "svce"<blob>="com.apple.something"\n'
            '    "svce"<blob>="openclaw-gateway-auth-token"\n'
        )

        assert KeychainBackend().list() == ["telegram-bot-token", "gateway-auth-token"]
        assert mock_run.call_args.kwargs["timeout"] == 30

"""Tests for openclaw_secure.document: reading and atomically writing openclaw.json."""

import json
import os
import stat

import pytest

from openclaw_secure.document import backup_config, expand_path, read_config, write_config
from openclaw_secure.errors import NotFoundError, ParseError


def _mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


class TestReadConfig:
    def test_reads_object(self, config_file, sample_config):
        assert read_config(config_file) == sample_config

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError, match="not found"):
            read_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "openclaw.json"
        path.write_text("{not json")
        with pytest.raises(ParseError):
            read_config(path)

    def test_non_object_root(self, tmp_path):
        path = tmp_path / "openclaw.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ParseError, match="JSON object"):
            read_config(path)

    def test_expands_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "openclaw.json").write_text('{"a": 1}')

        assert read_config("~/openclaw.json") == {"a": 1}
        assert expand_path("~/openclaw.json") == tmp_path.resolve() / "openclaw.json"


class TestWriteConfig:
    def test_two_space_indent_and_trailing_newline(self, tmp_path):
        path = tmp_path / "openclaw.json"

        write_config(path, {"gateway": {"port": 3577}})

        assert path.read_text() == '{\n  "gateway": {\n    "port": 3577\n  }\n}\n'

    def test_preserves_permissions(self, config_file):
        config_file.chmod(0o640)

        write_config(config_file, {"a": 1})

        assert _mode(config_file) == 0o640

    def test_new_file_is_owner_only(self, tmp_path):
        path = tmp_path / "fresh.json"

        write_config(path, {"a": 1})

        assert _mode(path) == 0o600

    def test_backs_up_previous_content(self, config_file, sample_config):
        write_config(config_file, {"a": 1})

        backup = config_file.with_name("openclaw.json.bak")
        assert json.loads(backup.read_text()) == sample_config
        assert json.loads(config_file.read_text()) == {"a": 1}

    def test_backup_can_be_disabled(self, config_file):
        write_config(config_file, {"a": 1}, create_backup=False)

        assert not config_file.with_name("openclaw.json.bak").exists()

    def test_leaves_no_temp_files(self, config_file):
        write_config(config_file, {"a": 1})

        leftovers = [p.name for p in config_file.parent.iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []

    def test_keeps_non_ascii(self, tmp_path):
        path = tmp_path / "openclaw.json"

        write_config(path, {"name": "Zoë"})

        assert "Zoë" in path.read_text(encoding="utf-8")


class TestBackupConfig:
    def test_returns_backup_path(self, config_file):
        backup = backup_config(config_file)

        assert backup.name == "openclaw.json.bak"
        assert backup.read_text() == config_file.read_text()

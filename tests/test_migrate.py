"""Tests for migrating v1.x backend key names."""

from openclaw_secure.constants import LEGACY_KEY_NAMES
from openclaw_secure.lifecycle import (
    REASON_IDENTICAL,
    REASON_NEW_EXISTED,
    REASON_NO_OLD_VALUE,
    migrate_keys,
)

WHISPER = {"skills.entries.openai-whisper-api.apiKey": "whisper-api-key"}


class TestMigrateKeys:
    def test_moves_old_name_to_new(self, make_backend):
        backend = make_backend({"whisper-api-key": "sk-abc"})

        (result,) = migrate_keys(backend, WHISPER)

        assert result.migrated
        assert result.old_name == "whisper-api-key"
        assert result.new_name == "openai-whisper-api-api-key"
        assert backend.store == {"openai-whisper-api-api-key": "sk-abc"}

    def test_no_old_value(self, backend):
        (result,) = migrate_keys(backend, WHISPER)

        assert not result.migrated
        assert result.reason == REASON_NO_OLD_VALUE
        assert backend.store == {}

    def test_new_name_wins_when_both_exist(self, make_backend):
        backend = make_backend({"whisper-api-key": "old", "openai-whisper-api-api-key": "new"})

        (result,) = migrate_keys(backend, WHISPER)

        assert result.migrated
        assert result.reason == REASON_NEW_EXISTED
        assert backend.store == {"openai-whisper-api-api-key": "new"}

    def test_identical_names_are_skipped(self, make_backend):
        backend = make_backend({"gateway-auth-token": "x"})

        (result,) = migrate_keys(backend, {"gateway.auth.token": "gateway-auth-token"})

        assert result.reason == REASON_IDENTICAL
        assert backend.calls == []

    def test_second_run_is_a_no_op(self, make_backend):
        backend = make_backend({"whisper-api-key": "sk-abc"})
        migrate_keys(backend, WHISPER)

        (result,) = migrate_keys(backend, WHISPER)

        assert result.reason == REASON_NO_OLD_VALUE
        assert backend.store == {"openai-whisper-api-api-key": "sk-abc"}

    def test_default_legacy_table(self, make_backend):
        backend = make_backend({"whisper-api-key": "sk-abc", "brave-search-api-key": "BSA123"})

        results = migrate_keys(backend)

        assert len(results) == len(LEGACY_KEY_NAMES)
        assert backend.store == {
            "openai-whisper-api-api-key": "sk-abc",
            "search-api-key": "BSA123",
        }

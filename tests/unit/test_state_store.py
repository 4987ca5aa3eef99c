"""
Unit tests for the SQLite state store.
"""

import json

import pytest

from korean_drill.core.card import Quality
from korean_drill.core.errors import StorageError
from korean_drill.core.scheduler import SRSEngine
from korean_drill.delivery.state_store import MemoryStore, StateStore


@pytest.fixture
def store(tmp_path):
    state_store = StateStore(tmp_path / "state.db")
    yield state_store
    state_store.close()


class TestStateStore:
    def test_missing_key(self, store):
        assert store.get("korean_srs") is None

    def test_set_and_overwrite(self, store):
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"
        assert store.keys() == ["k"]

    def test_persists_across_connections(self, tmp_path):
        first = StateStore(tmp_path / "state.db")
        first.set("korean_streak", '{"count": 1}')
        first.close()

        second = StateStore(tmp_path / "state.db")
        assert second.get("korean_streak") == '{"count": 1}'
        second.close()

    def test_scheduler_round_trip(self, store, clock):
        SRSEngine(store, clock).record_review("vocab:food:0", Quality.GOOD)
        assert SRSEngine(store, clock).peek_card("vocab:food:0").repetitions == 1

    def test_write_failure_raises_storage_error(self, store):
        store.conn.execute("DROP TABLE kv_store")
        with pytest.raises(StorageError):
            store.set("k", "v")


    def test_read_failure_raises_storage_error(self, store):
        store.conn.execute("DROP TABLE kv_store")
        with pytest.raises(StorageError):
            store.get("k")
        with pytest.raises(StorageError):
            store.keys()

    def test_corrupt_database_raises_storage_error(self, tmp_path):
        db_path = tmp_path / "state.db"
        db_path.write_bytes(b"this is not a sqlite database" * 100)
        with pytest.raises(StorageError):
            StateStore(db_path)

    def test_unusable_directory_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(StorageError):
            StateStore(blocker / "sub" / "state.db")


class TestBackups:
    def test_backup_selected_keys(self, store):
        store.set("korean_srs", "{}")
        store.set("korean_streak", "{}")

        backup_file = store.backup(["korean_srs"])
        data = json.loads(backup_file.read_text(encoding="utf-8"))

        assert data["values"] == {"korean_srs": "{}"}
        assert "timestamp" in data
        assert store.list_backups() == [backup_file]

    def test_backup_all_keys(self, store):
        store.set("a", "1")
        store.set("b", "2")
        data = json.loads(store.backup().read_text(encoding="utf-8"))
        assert data["values"] == {"a": "1", "b": "2"}

    def test_no_backups(self, store):
        assert store.list_backups() == []


class TestMemoryStore:
    def test_initial_values_are_copied(self):
        initial = {"k": "v"}
        store = MemoryStore(initial)
        store.set("k", "w")
        assert initial == {"k": "v"}
        assert store.get("k") == "w"

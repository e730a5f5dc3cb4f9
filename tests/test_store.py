"""Tests for the key-value store."""

from __future__ import annotations

import sqlite3

from scholarverse.library.store import (
    LIBRARY_KEY,
    NOTES_KEY,
    RECORD_KEYS,
    KeyValueStore,
)


class TestKeyValueStore:
    def test_load_missing(self, store: KeyValueStore):
        assert store.load(LIBRARY_KEY) is None

    def test_save_and_load(self, store: KeyValueStore):
        assert store.save(LIBRARY_KEY, '["1", "2"]') is True
        assert store.load(LIBRARY_KEY) == '["1", "2"]'

    def test_save_overwrites(self, store: KeyValueStore):
        store.save(NOTES_KEY, "{}")
        store.save(NOTES_KEY, '{"1": {"1": "hi"}}')
        assert store.load(NOTES_KEY) == '{"1": {"1": "hi"}}'

    def test_keys_independent(self, store: KeyValueStore):
        store.save(LIBRARY_KEY, "[]")
        assert store.keys() == [LIBRARY_KEY]
        assert store.load(NOTES_KEY) is None

    def test_persists_across_connections(self, tmp_path):
        path = tmp_path / "kv.db"
        first = KeyValueStore(path)
        first.save(LIBRARY_KEY, '["3"]')
        first.close()
        second = KeyValueStore(path)
        assert second.load(LIBRARY_KEY) == '["3"]'
        second.close()

    def test_save_failure_is_reported_not_raised(self, store: KeyValueStore):
        store._conn.execute("DROP TABLE records")
        assert store.save(LIBRARY_KEY, "[]") is False

    def test_load_failure_is_absent(self, store: KeyValueStore):
        store._conn.execute("DROP TABLE records")
        assert store.load(LIBRARY_KEY) is None

    def test_fixed_keys(self):
        assert RECORD_KEYS == (
            "scholarverse-library",
            "scholarverse-notes",
            "scholarverse-stats",
            "scholarverse-read-pages",
        )

    def test_wal_mode(self, store: KeyValueStore):
        row = store._conn.execute("PRAGMA journal_mode").fetchone()
        assert row[0] == "wal"
        assert isinstance(store._conn, sqlite3.Connection)

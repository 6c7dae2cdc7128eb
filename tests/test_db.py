"""Tests for the SQLite helpers and the key-value store backends.

SQLite tests use an in-memory database (`:memory:`); file-backed tests
write only under pytest's ``tmp_path``.
"""

import json
import sqlite3

import pytest

from dance_battle.db.manager import (
    delete_value,
    get_connection,
    get_value,
    init_db,
    set_value,
)
from dance_battle.engine import Scoreboard
from dance_battle.errors import CorruptStateError
from dance_battle.storage import (
    JsonFileStore,
    MemoryStore,
    SQLiteStore,
    open_store,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def conn():
    """Yield an initialised in-memory database connection."""
    connection = get_connection(":memory:")
    init_db(connection)
    yield connection
    connection.close()


# ---------------------------------------------------------------------------
# Schema creation tests
# ---------------------------------------------------------------------------

class TestSchemaCreation:

    def test_kv_table_exists(self, conn: sqlite3.Connection):
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()
        assert "kv_store" in {row["name"] for row in rows}

    def test_idempotent_init(self, conn: sqlite3.Connection):
        """Calling init_db twice must not raise or drop data."""
        set_value(conn, "k", "v")
        init_db(conn)
        assert get_value(conn, "k") == "v"

    def test_fixture_schema_matches(self, sqlite_conn: sqlite3.Connection):
        """The conftest connection sees the same table."""
        set_value(sqlite_conn, "k", "v")
        assert get_value(sqlite_conn, "k") == "v"


# ---------------------------------------------------------------------------
# Key-value helper tests
# ---------------------------------------------------------------------------

class TestKeyValueHelpers:

    def test_missing_key_returns_none(self, conn):
        assert get_value(conn, "absent") is None

    def test_set_then_get(self, conn):
        set_value(conn, "danceBattleCompetitors", "[]")
        assert get_value(conn, "danceBattleCompetitors") == "[]"

    def test_set_overwrites(self, conn):
        set_value(conn, "k", "one")
        set_value(conn, "k", "two")
        assert get_value(conn, "k") == "two"
        count = conn.execute("SELECT COUNT(*) AS cnt FROM kv_store").fetchone()["cnt"]
        assert count == 1

    def test_delete(self, conn):
        set_value(conn, "k", "v")
        assert delete_value(conn, "k") is True
        assert delete_value(conn, "k") is False
        assert get_value(conn, "k") is None


# ---------------------------------------------------------------------------
# Store backend tests
# ---------------------------------------------------------------------------

class TestMemoryStore:

    def test_roundtrip_and_delete(self):
        store = MemoryStore()
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
        store.delete("k")
        store.delete("k")
        assert store.get("k") is None


class TestSQLiteStore:

    def test_shared_connection_not_closed(self, conn):
        store = SQLiteStore(conn)
        store.set("k", "v")
        store.close()
        # The caller still owns the connection.
        assert get_value(conn, "k") == "v"

    def test_open_creates_parent_dirs(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "scoreboard.db"
        with SQLiteStore.open(str(db_path)) as store:
            store.set("k", "v")
        assert db_path.exists()

        with SQLiteStore.open(str(db_path)) as store:
            assert store.get("k") == "v"

    def test_scoreboard_persists_across_connections(self, tmp_path):
        db_path = str(tmp_path / "scoreboard.db")
        with SQLiteStore.open(db_path) as store:
            board = Scoreboard(store)
            alice = board.add_competitor("Alice")
            board.submit_score(alice.id, {"creativity": 5, "technique": 3, "presentation": 2})

        with SQLiteStore.open(db_path) as store:
            board = Scoreboard(store)
            assert [c.name for c in board.competitors] == ["Alice"]
            assert board.total_score(alice.id) == 10

    def test_open_non_database_file_raises(self, tmp_path):
        db_path = tmp_path / "scoreboard.db"
        db_path.write_text("this is not a database " * 20, encoding="utf-8")
        with pytest.raises(sqlite3.DatabaseError):
            SQLiteStore.open(str(db_path))


class TestJsonFileStore:

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "state.json")
        assert store.get("k") is None
        assert not (tmp_path / "state.json").exists()

    def test_set_writes_file(self, tmp_path):
        path = tmp_path / "sub" / "state.json"
        store = JsonFileStore(path)
        store.set("danceBattleScores", "[]")
        assert json.loads(path.read_text(encoding="utf-8")) == {"danceBattleScores": "[]"}
        assert JsonFileStore(path).get("danceBattleScores") == "[]"

    def test_delete_rewrites_file(self, tmp_path):
        path = tmp_path / "state.json"
        store = JsonFileStore(path)
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    @pytest.mark.parametrize("content", ["{oops", "[1, 2]", '{"k": 3}'])
    def test_unreadable_file_raises(self, tmp_path, content):
        path = tmp_path / "state.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(CorruptStateError):
            JsonFileStore(path)


class TestOpenStore:

    def test_memory(self):
        assert isinstance(open_store(":memory:"), MemoryStore)

    def test_json_suffix(self, tmp_path):
        assert isinstance(open_store(str(tmp_path / "s.JSON")), JsonFileStore)

    def test_sqlite_default(self, tmp_path):
        store = open_store(str(tmp_path / "s.db"))
        try:
            assert isinstance(store, SQLiteStore)
        finally:
            store.close()

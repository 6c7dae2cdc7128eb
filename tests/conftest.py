"""Shared pytest fixtures for the dance-battle test suite.

Provides:
    memory_store -- empty in-memory key-value store
    sqlite_conn  -- in-memory SQLite connection with the schema applied
    board        -- Scoreboard over an empty memory store
    seeded_board -- Scoreboard with Alice (10), Bob (15) and Cara (unscored)
"""

import pathlib
import sqlite3

import pytest

from dance_battle.engine import Scoreboard
from dance_battle.storage import MemoryStore


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def memory_store():
    """Return an empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture()
def sqlite_conn():
    """Create an in-memory SQLite connection with the schema applied.

    Yields the connection and closes it after the test.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row

    schema_path = (
        pathlib.Path(__file__).resolve().parent.parent
        / "src" / "dance_battle" / "db" / "schema.sql"
    )
    conn.executescript(schema_path.read_text(encoding="utf-8"))

    yield conn
    conn.close()


# ---------------------------------------------------------------------------
# Scoreboard fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def board(memory_store):
    """Return a Scoreboard with no competitors."""
    return Scoreboard(memory_store)


@pytest.fixture()
def seeded_board(memory_store):
    """Return a Scoreboard with three competitors added in order.

    - Alice: 5 / 3 / 2  -> total 10
    - Bob:   5 / 5 / 5  -> total 15
    - Cara:  no score   -> total 0
    """
    sb = Scoreboard(memory_store)
    alice = sb.add_competitor("Alice")
    bob = sb.add_competitor("Bob")
    sb.add_competitor("Cara")
    sb.submit_score(alice.id, {"creativity": 5, "technique": 3, "presentation": 2})
    sb.submit_score(bob.id, {"creativity": 5, "technique": 5, "presentation": 5})
    return sb

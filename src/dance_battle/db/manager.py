"""Database manager for the dance-battle project.

Provides connection management, schema initialization, and key-value
helpers for the SQLite store.  All functions take a connection object as
their first parameter and do not manage global state.
"""

import logging
import pathlib
import sqlite3

logger = logging.getLogger(__name__)


def get_connection(db_path: str) -> sqlite3.Connection:
    """Open a SQLite connection with Row factory enabled.

    Args:
        db_path: Filesystem path to the SQLite database file, or ":memory:"
                 for an in-memory database.

    Returns:
        A ``sqlite3.Connection`` configured with ``sqlite3.Row`` as
        ``row_factory``.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create the ``kv_store`` table by executing ``schema.sql``.

    The SQL file is located relative to this module using ``__file__``
    so it works regardless of the current working directory.

    Args:
        conn: An open SQLite connection.
    """
    schema_path = pathlib.Path(__file__).with_name("schema.sql")
    schema_sql = schema_path.read_text(encoding="utf-8")
    conn.executescript(schema_sql)
    logger.info("Database schema initialized from %s", schema_path)


def get_value(conn: sqlite3.Connection, key: str) -> str | None:
    """Return the stored text for *key*, or ``None`` if it was never set.

    Args:
        conn: An open SQLite connection.
        key: The storage key.
    """
    row = conn.execute(
        "SELECT value FROM kv_store WHERE key = ?", (key,)
    ).fetchone()
    return row["value"] if row is not None else None


def set_value(conn: sqlite3.Connection, key: str, value: str) -> None:
    """Insert or overwrite the text stored under *key* and commit.

    Args:
        conn: An open SQLite connection.
        key: The storage key.
        value: The serialized value.
    """
    conn.execute(
        """
        INSERT INTO kv_store (key, value, updated_at)
        VALUES (:key, :value, CURRENT_TIMESTAMP)
        ON CONFLICT(key) DO UPDATE SET
            value = excluded.value,
            updated_at = excluded.updated_at
        """,
        {"key": key, "value": value},
    )
    conn.commit()
    logger.debug("Stored %d characters under key=%s", len(value), key)


def delete_value(conn: sqlite3.Connection, key: str) -> bool:
    """Remove *key* from the store.

    Returns:
        ``True`` if a row was deleted, ``False`` if the key was absent.
    """
    cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
    conn.commit()
    return cursor.rowcount > 0

"""Key-value store backends for persisting scoreboard state.

Every backend stores plain text values under string keys, the same
contract a browser's local storage offers.  ``open_store`` picks a
backend from a path:

- ``:memory:``  -- :class:`MemoryStore` (nothing survives the process)
- ``*.json``    -- :class:`JsonFileStore`
- anything else -- :class:`SQLiteStore`
"""

from __future__ import annotations

import json
import logging
import pathlib
import sqlite3
from abc import ABC, abstractmethod

from dance_battle.db.manager import (
    delete_value,
    get_connection,
    get_value,
    init_db,
    set_value,
)
from dance_battle.errors import CorruptStateError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Abstract base class for all key-value store backends."""

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the text stored under *key*, or ``None`` if absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*; a missing key is not an error."""
        ...

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release any underlying resources."""

    def __enter__(self) -> KeyValueStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class MemoryStore(KeyValueStore):
    """Dict-backed store, used by tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SQLiteStore(KeyValueStore):
    """Store backed by the ``kv_store`` table of a SQLite database.

    Either pass an already-open connection (the caller keeps ownership)
    or let :meth:`open` create and initialise one.
    """

    def __init__(self, conn, owns_connection: bool = False) -> None:
        self.conn = conn
        self._owns_connection = owns_connection

    @classmethod
    def open(cls, db_path: str) -> SQLiteStore:
        """Open (creating if necessary) the database at *db_path*."""
        if db_path != ":memory:":
            parent = pathlib.Path(db_path).parent
            parent.mkdir(parents=True, exist_ok=True)

        conn = get_connection(db_path)
        try:
            init_db(conn)
        except sqlite3.DatabaseError:
            conn.close()
            raise
        logger.info("SQLite store opened at %s", db_path)
        return cls(conn, owns_connection=True)

    def get(self, key: str) -> str | None:
        return get_value(self.conn, key)

    def set(self, key: str, value: str) -> None:
        set_value(self.conn, key, value)

    def delete(self, key: str) -> None:
        delete_value(self.conn, key)

    def close(self) -> None:
        if self._owns_connection:
            self.conn.close()
            logger.debug("SQLite store connection closed")


class JsonFileStore(KeyValueStore):
    """Store that keeps every key in a single JSON object file.

    The file is read once when the store is opened and rewritten in full
    on every ``set``/``delete``.
    """

    def __init__(self, path: str | pathlib.Path) -> None:
        self.path = pathlib.Path(path)
        self._data = self._read()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CorruptStateError(str(self.path), f"invalid JSON ({exc.msg})") from exc
        if not isinstance(raw, dict) or not all(
            isinstance(v, str) for v in raw.values()
        ):
            raise CorruptStateError(
                str(self.path), "expected an object of string values"
            )
        return raw

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self._data, indent=2, sort_keys=True),
            encoding="utf-8",
        )

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()


def open_store(path: str) -> KeyValueStore:
    """Return the store backend matching *path*."""
    if path == ":memory:":
        return MemoryStore()
    if path.lower().endswith(".json"):
        logger.info("JSON file store opened at %s", path)
        return JsonFileStore(path)
    return SQLiteStore.open(path)

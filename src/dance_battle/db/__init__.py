"""Database sub-package for the dance-battle project.

Exports the core database functions so that other modules can import
them directly from ``dance_battle.db``:

    from dance_battle.db import get_connection, init_db, get_value
"""

from dance_battle.db.manager import (
    delete_value,
    get_connection,
    get_value,
    init_db,
    set_value,
)

__all__ = [
    "delete_value",
    "get_connection",
    "get_value",
    "init_db",
    "set_value",
]

"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations on application start
(``init_db``).  It backs ``SQLiteUserStore``; to switch to another
DBMS you would replace connection logic and adapt SQL syntax
accordingly.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import settings


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        -- The UNIQUE constraint makes concurrent inserts of the same
        -- username resolve to a single winner.
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``database_url`` defaults to ``settings.database_url``.  An absolute
    path is used directly; anything else is resolved relative to the
    project root.
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # user_registry_api/
    return str((base_dir / db_url).resolve())


def get_connection(database_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name.
    """
    conn = sqlite3.connect(database_path or get_database_path())
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(database_path: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(database_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(database_path: Optional[str] = None) -> int:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  Returns the schema version after migrating.  If you
    add a new migration, append it with an incremented version number.
    """
    with get_cursor(database_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
    return current_version

"""
Persistence for user records.

``UserStore`` is the interface the ``UserService`` is constructed with.
Two implementations are provided: ``SQLiteUserStore`` for the running
service and ``InMemoryUserStore`` for tests and throwaway instances.
Both resolve a concurrent registration of the same username in favour
of the first writer; the loser's ``add`` returns ``False``.
"""

import abc
import logging
import sqlite3
import threading
from typing import Dict, List, Optional

from user_registry_api.app.core.db import get_connection, get_database_path, init_db
from user_registry_api.app.schemas.user import User


logger = logging.getLogger(__name__)


class UserStore(abc.ABC):
    """Storage contract keyed by username."""

    @abc.abstractmethod
    def exists(self, username: str) -> bool:
        """Return ``True`` if a user with this username is stored."""

    @abc.abstractmethod
    def find(self, username: str, password: str) -> Optional[User]:
        """Return the user whose username and password both match exactly."""

    @abc.abstractmethod
    def add(self, user: User) -> bool:
        """Persist ``user``.  Return ``False`` if it could not be stored."""

    @abc.abstractmethod
    def delete(self, username: str) -> None:
        """Remove the user if present; absent usernames are ignored."""

    @abc.abstractmethod
    def list_all(self) -> List[User]:
        """Return every stored user in insertion order."""


class InMemoryUserStore(UserStore):
    """Dict-backed store.  Contents are lost when the process exits."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def exists(self, username: str) -> bool:
        with self._lock:
            return username in self._users

    def find(self, username: str, password: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(username)
        if user is not None and user.password == password:
            return user
        return None

    def add(self, user: User) -> bool:
        with self._lock:
            if user.username in self._users:
                return False
            self._users[user.username] = User(username=user.username, password=user.password)
            return True

    def delete(self, username: str) -> None:
        with self._lock:
            self._users.pop(username, None)

    def list_all(self) -> List[User]:
        with self._lock:
            return list(self._users.values())


class SQLiteUserStore(UserStore):
    """Store backed by the ``users`` table in SQLite.

    Each operation opens its own connection, so instances are safe to
    share between the worker threads FastAPI runs sync routes in.
    """

    def __init__(self, database_path: Optional[str] = None) -> None:
        self.database_path = get_database_path(database_path)

    def init_schema(self) -> None:
        version = init_db(self.database_path)
        logger.info("User database %s at schema version %s", self.database_path, version)

    def exists(self, username: str) -> bool:
        conn = get_connection(self.database_path)
        try:
            row = conn.execute(
                "SELECT 1 FROM users WHERE username = ? LIMIT 1", (username,)
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def find(self, username: str, password: str) -> Optional[User]:
        conn = get_connection(self.database_path)
        try:
            row = conn.execute(
                "SELECT username, password FROM users WHERE username = ? AND password = ?",
                (username, password),
            ).fetchone()
            if row:
                return User(username=row["username"], password=row["password"])
            return None
        finally:
            conn.close()

    def add(self, user: User) -> bool:
        conn = get_connection(self.database_path)
        try:
            conn.execute(
                "INSERT INTO users (username, password) VALUES (?, ?)",
                (user.username, user.password),
            )
            conn.commit()
            return True
        except sqlite3.IntegrityError:
            conn.rollback()
            logger.warning("User %s was registered concurrently; insert rejected", user.username)
            return False
        except sqlite3.Error:
            conn.rollback()
            logger.exception("Failed to store user %s", user.username)
            return False
        finally:
            conn.close()

    def delete(self, username: str) -> None:
        conn = get_connection(self.database_path)
        try:
            conn.execute("DELETE FROM users WHERE username = ?", (username,))
            conn.commit()
        finally:
            conn.close()

    def list_all(self) -> List[User]:
        conn = get_connection(self.database_path)
        try:
            rows = conn.execute("SELECT username, password FROM users ORDER BY id").fetchall()
            return [User(username=row["username"], password=row["password"]) for row in rows]
        finally:
            conn.close()

"""
Business logic for users.

``UserService`` combines a ``UserStore`` with a breach checker.  It is
constructed explicitly with both collaborators, which lets tests swap
in ``InMemoryUserStore`` and ``StaticBreachChecker``.  Passwords are
never written to the log.
"""

import logging
from typing import List, Optional

from ..schemas.user import User
from .breach_service import BreachChecker
from .user_store import UserStore


logger = logging.getLogger(__name__)


class UserService:
    """Policy layer the user endpoints call."""

    def __init__(self, store: UserStore, checker: BreachChecker) -> None:
        self.store = store
        self.checker = checker

    def exists(self, username: str) -> bool:
        return self.store.exists(username)

    def password_leaked(self, password: str) -> bool:
        """Ask the breach checker about ``password``.

        ``BreachCheckError`` from the checker propagates to the caller.
        """
        return self.checker.is_leaked(password)

    def add(self, user: User) -> bool:
        """Store a new user.

        Returns ``False`` when the store refused or failed the insert;
        the cause has already been logged by the store.
        """
        logger.info("Registering user %s", user.username)
        added = self.store.add(user)
        if not added:
            logger.warning("Registration of user %s was not persisted", user.username)
        return added

    def get(self, username: str, password: str) -> Optional[User]:
        return self.store.find(username, password)

    def get_all(self) -> List[User]:
        return self.store.list_all()

    def delete(self, username: str) -> None:
        logger.info("Deleting user %s", username)
        self.store.delete(username)

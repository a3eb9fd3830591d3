"""
Login and user-level checks.

These operate on the :class:`.UserSession` held in a session record. The
caller is responsible for saving the refreshed session returned by
:func:`require_login`.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

from .domain import UserSession
from .exceptions import ExpiredToken, InvalidToken, PermissionDenied

logger = logging.getLogger(__name__)

IDLE_TIMEOUT = 86400 * 1000
"""How long a session without "remember me" survives without activity."""


def _now() -> int:
    return int(time.time() * 1000)


class UserStore(ABC):
    """Read access to persisted users."""

    @abstractmethod
    def get_level_by_id(self, user_id: str) -> int:
        """Get the level of a user."""


def login(user_id: str, remember: bool = False,
          now: Optional[int] = None) -> UserSession:
    """Start a login session for an authenticated user."""
    return UserSession(user_id=user_id, remember=remember,
                       last_seen=_now() if now is None else now)


def logout() -> UserSession:
    """An empty login session."""
    return UserSession()


def require_login(user: UserSession,
                  now: Optional[int] = None) -> UserSession:
    """
    Check that a user is logged in.

    Returns
    -------
    :class:`.UserSession`
        The session with its activity time refreshed, unless the user asked
        to be remembered.

    Raises
    ------
    :class:`.InvalidToken`
        If nobody is logged in.
    :class:`.ExpiredToken`
        If the session has been idle for more than a day.

    """
    now = _now() if now is None else now
    if not user.user_id:
        raise InvalidToken('Not logged in')
    if user.remember:
        return user
    if user.last_seen is None or now - user.last_seen > IDLE_TIMEOUT:
        logger.debug('Login session of %s is idle', user.user_id)
        raise ExpiredToken('Login session has expired')
    return user._replace(last_seen=now)


def require_min_user_level(user: UserSession, users: UserStore,
                           min_level: int = 0) -> None:
    """Require the logged-in user to be at least at ``min_level``."""
    if users.get_level_by_id(user.user_id) < min_level:
        raise PermissionDenied(f'Requires level {min_level} or above')


def require_user_level(user: UserSession, users: UserStore,
                       level: int = 0) -> None:
    """Require the logged-in user to be exactly at ``level``."""
    if users.get_level_by_id(user.user_id) != level:
        raise PermissionDenied(f'Requires level {level}')

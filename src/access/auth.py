# src/access/auth.py
"""Credential checks against the loaded account list."""
import logging
from collections.abc import Iterable

from src.access.passwords import verify_password
from src.journal.models import User
from src.models.errors import AuthenticationError

logger = logging.getLogger(__name__)


def find_user(users: Iterable[User], username: str) -> User | None:
    """Case-insensitive username lookup."""
    wanted = username.strip().lower()
    for user in users:
        if user.username.lower() == wanted:
            return user
    return None


def authenticate(users: Iterable[User], username: str, password: str) -> User:
    """Return the matching active account.

    Raises:
        AuthenticationError: Unknown user, wrong password or disabled account.
    """
    user = find_user(users, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for {username!r}")
        raise AuthenticationError("Incorrect username or password")

    if not user.is_active:
        raise AuthenticationError("This account has been disabled, contact an administrator")

    return user

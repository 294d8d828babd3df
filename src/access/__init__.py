# src/access/__init__.py
"""Access control: roles, navigation gate, password hashing, login."""

from src.access.auth import authenticate, find_user
from src.access.gate import AccessGate, View, can_view, visible_views
from src.access.passwords import hash_password, verify_password

__all__ = [
    "AccessGate",
    "View",
    "authenticate",
    "can_view",
    "find_user",
    "hash_password",
    "verify_password",
    "visible_views",
]

# src/access/passwords.py
"""Salted password hashing through werkzeug.security."""
from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "scrypt"


def hash_password(password: str, method: str = DEFAULT_METHOD) -> str:
    """Hash a password as ``method$salt$hash``.

    Args:
        password: Plaintext to hash; never stored.
        method: werkzeug hash method, e.g. ``"scrypt"`` or ``"pbkdf2:sha256:1000"``.
    """
    return generate_password_hash(password, method=method)


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a stored hash.

    Empty, malformed or unknown-method hashes never match.
    """
    if not encoded:
        return False
    try:
        return check_password_hash(encoded, password)
    except (TypeError, ValueError):
        return False

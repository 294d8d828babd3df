# tests/access/test_passwords.py
"""Tests for password hashing."""
import pytest

from src.access.passwords import DEFAULT_METHOD, hash_password, verify_password

FAST_METHOD = "pbkdf2:sha256:1000"


class TestPasswords:
    """Tests for hash_password and verify_password."""

    def test_hash_never_contains_plaintext(self):
        encoded = hash_password("s3cret-value", method=FAST_METHOD)

        assert "s3cret-value" not in encoded
        assert encoded.startswith(f"{FAST_METHOD}$")

    def test_default_method(self):
        encoded = hash_password("s3cret-value")

        assert encoded.startswith(f"{DEFAULT_METHOD}:")
        assert verify_password("s3cret-value", encoded) is True

    def test_verify_round_trip(self):
        encoded = hash_password("hunter2", method=FAST_METHOD)

        assert verify_password("hunter2", encoded) is True
        assert verify_password("hunter3", encoded) is False

    def test_salt_differs_between_hashes(self):
        """The same password should hash differently each time."""
        assert hash_password("pw", method=FAST_METHOD) != hash_password("pw", method=FAST_METHOD)

    @pytest.mark.parametrize(
        "encoded",
        ["", "plaintext", "md5$salt$digest", "pbkdf2:sha256:many$salt$digest"],
    )
    def test_malformed_hash_never_matches(self, encoded):
        """verify_password should reject malformed hashes instead of raising."""
        assert verify_password("plaintext", encoded) is False

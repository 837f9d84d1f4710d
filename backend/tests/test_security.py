"""
Nexio Backend — Password and Token Tests
=========================================

Test Strategy:
    ✅ bcrypt hashes verify and never equal the plain text
    ✅ Passwords over 72 bytes are refused
    ✅ Tokens round-trip their subject; tampered/expired tokens fail
"""

from datetime import timedelta

import pytest

from nexio.exceptions import AuthenticationError, ValidationError
from nexio.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert hashed.startswith("$2")
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    def test_same_password_different_salts(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_long_password_rejected(self):
        with pytest.raises(ValidationError, match="at most 72 bytes"):
            hash_password("x" * 73)

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("secret123", "plaintext-from-an-old-row")


class TestAccessTokens:

    def test_subject_round_trip(self):
        token = create_access_token("user-1")
        assert decode_access_token(token) == "user-1"

    def test_tampered_token(self):
        token = create_access_token("user-1")
        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            decode_access_token(token.rsplit(".", 1)[0] + ".forged-signature")

    def test_expired_token(self):
        token = create_access_token("user-1", expires_delta=timedelta(seconds=-10))
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_garbage_token(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("not-a-jwt")

# =============================================================================
# tests/test_security.py - Password and Token Helper Tests
# =============================================================================

from datetime import timedelta

import pytest
from jose import jwt

from lib.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenDecodeError,
    create_token,
    decode_token,
    hash_password,
    verify_password,
)

SECRET = "test-secret-key-0123456789"


class TestPasswords:
    """Tests for bcrypt hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password("correct-horse-42")

        assert hashed != "correct-horse-42"
        assert verify_password("correct-horse-42", hashed)
        assert not verify_password("wrong-horse-42", hashed)

    def test_same_password_hashes_differently(self):
        """Test that every hash gets a fresh salt."""
        assert hash_password("correct-horse-42") != hash_password("correct-horse-42")

    def test_missing_or_malformed_hash_is_rejected(self):
        assert not verify_password("anything1", None)
        assert not verify_password("anything1", "not-a-bcrypt-hash")


class TestTokens:
    """Tests for JWT creation and verification."""

    def test_access_token_round_trip(self):
        token, claims = create_token("user-1", ACCESS_TOKEN_TYPE, SECRET, timedelta(hours=1),
                                     extra_claims={"email": "a@example.com"})

        payload = decode_token(token, SECRET, ACCESS_TOKEN_TYPE)

        assert payload["sub"] == "user-1"
        assert payload["email"] == "a@example.com"
        assert payload["exp"] - payload["iat"] == 3600
        assert "jti" not in claims

    def test_refresh_token_has_jti(self):
        _, claims = create_token("user-1", REFRESH_TOKEN_TYPE, SECRET, timedelta(days=1))

        assert claims["jti"]

    def test_expired_token(self):
        token, _ = create_token("user-1", ACCESS_TOKEN_TYPE, SECRET, timedelta(seconds=-10))

        with pytest.raises(TokenDecodeError) as exc_info:
            decode_token(token, SECRET, ACCESS_TOKEN_TYPE)

        assert exc_info.value.expired

    def test_wrong_secret(self):
        token, _ = create_token("user-1", ACCESS_TOKEN_TYPE, SECRET, timedelta(hours=1))

        with pytest.raises(TokenDecodeError):
            decode_token(token, "another-secret-0123456789", ACCESS_TOKEN_TYPE)

    def test_refresh_token_is_not_an_access_token(self):
        token, _ = create_token("user-1", REFRESH_TOKEN_TYPE, SECRET, timedelta(days=1))

        with pytest.raises(TokenDecodeError):
            decode_token(token, SECRET, ACCESS_TOKEN_TYPE)

    def test_missing_subject(self):
        token = jwt.encode({"type": ACCESS_TOKEN_TYPE, "exp": 9999999999}, SECRET, algorithm="HS256")

        with pytest.raises(TokenDecodeError):
            decode_token(token, SECRET, ACCESS_TOKEN_TYPE)

    def test_garbage_token(self):
        with pytest.raises(TokenDecodeError):
            decode_token("not.a.jwt", SECRET, ACCESS_TOKEN_TYPE)

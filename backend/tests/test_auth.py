"""Tests for authentication primitives: password hashing and access tokens."""

import pytest
from datetime import timedelta

import jwt

from cafe.core.config import settings
from cafe.core.errors import InvalidTokenError
from cafe.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    issue_token,
    verify_access_token,
    verify_password,
)


# ============== Password hashing ==============

class TestPasswordHashing:
    def test_hash_and_verify(self):
        h = get_password_hash("secret123")
        assert verify_password("secret123", h)

    def test_wrong_password_rejected(self):
        h = get_password_hash("secret123")
        assert not verify_password("wrong", h)

    def test_hash_is_unique(self):
        h1 = get_password_hash("same")
        h2 = get_password_hash("same")
        assert h1 != h2  # different salts

    def test_hash_is_not_plaintext(self):
        h = get_password_hash("secret123")
        assert "secret123" not in h
        assert h.startswith("$2")

    def test_invalid_hash_returns_false(self):
        assert not verify_password("test", "not-a-hash")


# ============== JWT tokens ==============

class TestJWTTokens:
    def test_issue_and_verify(self):
        token = issue_token(42, "a@b.com", "staff")
        identity = verify_access_token(token)
        assert identity.user_id == 42
        assert identity.id == 42
        assert identity.email == "a@b.com"
        assert identity.role == "staff"

    def test_token_has_expiry(self):
        payload = decode_access_token(issue_token(1, "a@b.com", "customer"))
        assert "exp" in payload
        assert "iat" in payload
        assert payload["sub"] == "1"

    def test_default_lifetime_is_seven_days(self):
        payload = decode_access_token(issue_token(1, "a@b.com", "customer"))
        assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60

    def test_expired_token_rejected(self):
        token = create_access_token(
            data={"sub": "1", "email": "a@b.com", "role": "admin"},
            expires_delta=timedelta(seconds=-10),
        )
        assert decode_access_token(token) is None
        with pytest.raises(InvalidTokenError):
            verify_access_token(token)

    def test_wrong_signature_rejected(self):
        token = jwt.encode(
            {"sub": "1", "email": "a@b.com", "role": "admin", "exp": 9999999999},
            "some-other-secret-key-that-is-long-enough",
            algorithm=settings.algorithm,
        )
        with pytest.raises(InvalidTokenError):
            verify_access_token(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            verify_access_token("not.a.token")
        assert exc_info.value.message == "Invalid or expired token."

    def test_missing_claims_rejected(self):
        token = create_access_token(data={"sub": "1"})
        with pytest.raises(InvalidTokenError) as exc_info:
            verify_access_token(token)
        assert exc_info.value.message == "Invalid token payload."

    def test_non_numeric_subject_rejected(self):
        token = create_access_token(data={"sub": "abc", "email": "a@b.com", "role": "admin"})
        with pytest.raises(InvalidTokenError):
            verify_access_token(token)

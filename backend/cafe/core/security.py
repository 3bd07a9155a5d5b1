"""Security utilities: JWT tokens and password hashing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from jwt.exceptions import PyJWTError

from cafe.core.config import Settings, get_settings
from cafe.core.errors import InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenData:
    """Identity resolved from a verified access token."""

    user_id: int
    email: str
    role: str

    @property
    def id(self) -> int:
        return self.user_id


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hash.

    Uses bcrypt's built-in timing-safe comparison.
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.warning(f"Password verification error: {e}")
        return False


def get_password_hash(password: str, settings: Settings | None = None) -> str:
    """Hash a password using bcrypt with the configured cost factor."""
    settings = settings or get_settings()
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(rounds=settings.bcrypt_rounds),
    ).decode("utf-8")


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Create a signed, expiring JWT access token."""
    settings = settings or get_settings()
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def issue_token(user_id: int, email: str, role: str, settings: Settings | None = None) -> str:
    """Issue an access token for a user identity."""
    return create_access_token(
        data={"sub": str(user_id), "email": email, "role": role}, settings=settings
    )


def decode_access_token(token: str, settings: Settings | None = None) -> dict[str, Any] | None:
    """Decode and validate a JWT token. Returns None when invalid or expired."""
    settings = settings or get_settings()
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require": ["exp", "sub"]},
        )
    except PyJWTError as e:
        logger.debug(f"JWT decode error: {e}")
        return None


def verify_access_token(token: str, settings: Settings | None = None) -> TokenData:
    """Resolve a token to its identity or raise InvalidTokenError."""
    payload = decode_access_token(token, settings)
    if payload is None:
        raise InvalidTokenError()

    user_id = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    if email is None or role is None:
        raise InvalidTokenError("Invalid token payload.")

    try:
        return TokenData(user_id=int(user_id), email=email, role=role)
    except (TypeError, ValueError):
        raise InvalidTokenError("Invalid token payload.")

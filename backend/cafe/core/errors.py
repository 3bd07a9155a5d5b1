"""Domain errors raised by services and translated to HTTP responses in main."""

from typing import Any, Dict, Optional

from fastapi import status


class CafeError(Exception):
    """Base class for failures that map onto a specific HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, headers: Optional[Dict[str, str]] = None):
        self.message = message
        self.headers = headers
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(CafeError):
    """Missing field, malformed input or uniqueness violation."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateEmailError(ValidationError):
    """A user with the given email already exists."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User with this email already exists")


class AuthenticationError(CafeError):
    """Missing token, bad token or bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Access denied. No token provided."):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class InvalidTokenError(AuthenticationError):
    """Token signature, structure or expiry check failed."""

    def __init__(self, message: str = "Invalid or expired token."):
        super().__init__(message)


class PermissionDeniedError(CafeError):
    """Valid identity, but the role or account state does not allow the call."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(CafeError):
    """A referenced id does not resolve to a record."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity} not found")


class BusinessNumberExhaustedError(CafeError):
    """Could not generate a unique business number within the retry budget."""

    def __init__(self, prefix: str, attempts: int):
        self.prefix = prefix
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a unique {prefix} number after {attempts} attempts"
        )

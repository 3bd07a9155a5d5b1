"""Authentication schemas."""

from pydantic import EmailStr, Field

from cafe.schemas.base import CamelModel
from cafe.schemas.user import UserResponse


class LoginRequest(CamelModel):
    """Login request body."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class AuthResponse(CamelModel):
    """Issued token plus the account it belongs to."""

    message: str
    token: str
    user: UserResponse

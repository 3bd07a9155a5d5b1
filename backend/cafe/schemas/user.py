"""User schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from cafe.core.rbac import UserRole
from cafe.schemas.base import CamelModel


def _strip_required(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


class UserCreate(CamelModel):
    """Registration body."""

    first_name: str = Field(..., max_length=50)
    last_name: str = Field(..., max_length=50)
    email: EmailStr
    password: str = Field(..., max_length=128)
    phone: Optional[str] = Field(None, max_length=15)
    role: UserRole = UserRole.CUSTOMER

    @field_validator("first_name")
    @classmethod
    def first_name_required(cls, v: str) -> str:
        return _strip_required(v, "First name")

    @field_validator("last_name")
    @classmethod
    def last_name_required(cls, v: str) -> str:
        return _strip_required(v, "Last name")

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class ProfileUpdate(CamelModel):
    """Fields a user may change on their own account."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = Field(None, max_length=15)
    password: Optional[str] = Field(None, min_length=6, max_length=128)


class UserUpdate(ProfileUpdate):
    """Administrative update of any account."""

    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserResponse(CamelModel):
    """User as returned by the API. Never carries the password hash."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserEnvelope(CamelModel):
    message: str
    user: UserResponse

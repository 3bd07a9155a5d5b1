"""User routes: registration, login, profile and administration."""

import logging
from typing import List

from fastapi import APIRouter, Request, status

from cafe.core.config import AppSettings
from cafe.core.errors import PermissionDeniedError
from cafe.core.rate_limit import auth_rate_limit, limiter
from cafe.core.rbac import (
    CurrentUser,
    OptionalCurrentUser,
    RequireAdmin,
    RequireAdminOrStaff,
    UserRole,
)
from cafe.core.security import issue_token
from cafe.db.session import DbSession
from cafe.schemas.auth import AuthResponse, LoginRequest
from cafe.schemas.base import MessageResponse
from cafe.schemas.user import (
    ProfileUpdate,
    UserCreate,
    UserEnvelope,
    UserResponse,
    UserUpdate,
)
from cafe.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_rate_limit)
def register(
    request: Request,
    user_in: UserCreate,
    db: DbSession,
    app_settings: AppSettings,
    current_user: OptionalCurrentUser,
):
    """Create an account. Roles other than customer need an admin token."""
    if user_in.role != UserRole.CUSTOMER:
        if current_user is None or current_user.role != UserRole.ADMIN.value:
            logger.warning(
                f"Rejected registration of {user_in.email} as {user_in.role.value} "
                f"from IP: {_client_ip(request)}"
            )
            raise PermissionDeniedError("Access denied. Only admins can assign this role.")

    user = UserService(db, app_settings).create(user_in)
    token = issue_token(user.id, user.email, user.role.value, app_settings)
    return {"message": "User registered successfully", "token": token, "user": user}


@router.post("/login", response_model=AuthResponse)
@limiter.limit(auth_rate_limit)
def login(request: Request, credentials: LoginRequest, db: DbSession, app_settings: AppSettings):
    """Exchange email and password for a bearer token."""
    user = UserService(db).authenticate(
        credentials.email, credentials.password, client_ip=_client_ip(request)
    )
    token = issue_token(user.id, user.email, user.role.value, app_settings)
    return {"message": "Login successful", "token": token, "user": user}


@router.get("/profile", response_model=UserResponse)
def get_profile(db: DbSession, current_user: CurrentUser):
    return UserService(db).get(current_user.id)


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    profile_in: ProfileUpdate, db: DbSession, app_settings: AppSettings, current_user: CurrentUser
):
    service = UserService(db, app_settings)
    user = service.update(service.get(current_user.id), profile_in.model_dump(exclude_unset=True))
    return {"message": "Profile updated successfully", "user": user}


@router.delete("/profile", response_model=MessageResponse)
def delete_profile(db: DbSession, current_user: CurrentUser):
    service = UserService(db)
    service.delete(service.get(current_user.id))
    return {"message": "Account deleted successfully"}


@router.get("/all", response_model=List[UserResponse])
def list_users(db: DbSession, current_user: RequireAdminOrStaff):
    return UserService(db).list_users()


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: int,
    user_in: UserUpdate,
    db: DbSession,
    app_settings: AppSettings,
    current_user: RequireAdmin,
):
    service = UserService(db, app_settings)
    user = service.update(service.get(user_id), user_in.model_dump(exclude_unset=True))
    return {"message": "User updated successfully", "user": user}


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: DbSession, current_user: RequireAdmin):
    service = UserService(db)
    service.delete(service.get(user_id))
    return {"message": "User deleted successfully"}

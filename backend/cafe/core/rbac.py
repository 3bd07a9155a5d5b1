"""Role-Based Access Control (RBAC) utilities.

Every protected route declares its policy with one of the annotated
dependencies below; the check runs on every request, there is no session.
"""

from enum import Enum
from typing import Annotated, Optional

from fastapi import Depends, Request

from cafe.core.config import get_app_settings
from cafe.core.errors import AuthenticationError, PermissionDeniedError
from cafe.core.security import TokenData, verify_access_token


class UserRole(str, Enum):
    """User roles for RBAC."""

    ADMIN = "admin"
    STAFF = "staff"
    CUSTOMER = "customer"


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


async def get_current_user(request: Request) -> TokenData:
    """Resolve the caller from the ``Authorization: Bearer <token>`` header."""
    token = _bearer_token(request)
    if token is None:
        raise AuthenticationError()

    current_user = verify_access_token(token, get_app_settings(request))
    request.state.user = current_user
    return current_user


async def get_optional_current_user(request: Request) -> Optional[TokenData]:
    """Like get_current_user, but anonymous callers resolve to None."""
    if _bearer_token(request) is None:
        return None
    return await get_current_user(request)


def require_roles(*allowed: UserRole):
    """Dependency factory enforcing a role allow-list after authentication."""
    allowed_values = {role.value for role in allowed}

    async def role_checker(
        current_user: Annotated[TokenData, Depends(get_current_user)]
    ) -> TokenData:
        if current_user.role not in allowed_values:
            raise PermissionDeniedError(
                f"Access denied. Requires role: {', '.join(sorted(allowed_values))}."
            )
        return current_user

    return role_checker


CurrentUser = Annotated[TokenData, Depends(get_current_user)]
OptionalCurrentUser = Annotated[Optional[TokenData], Depends(get_optional_current_user)]
RequireAdmin = Annotated[TokenData, Depends(require_roles(UserRole.ADMIN))]
RequireAdminOrStaff = Annotated[
    TokenData, Depends(require_roles(UserRole.ADMIN, UserRole.STAFF))
]

"""User accounts: registration, login and profile management."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cafe.core.config import Settings, get_settings
from cafe.core.errors import (
    AuthenticationError,
    DuplicateEmailError,
    PermissionDeniedError,
)
from cafe.core.security import get_password_hash, verify_password
from cafe.models.user import User
from cafe.schemas.user import UserCreate
from cafe.services.common import apply_changes, build, get_or_404

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class UserService:
    """Credential store on top of the users table."""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def get(self, user_id: int) -> User:
        return get_or_404(self.db, User, user_id, "User")

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def create(self, data: UserCreate) -> User:
        """Create a user, hashing the password. Raises DuplicateEmailError."""
        if self.get_by_email(data.email) is not None:
            raise DuplicateEmailError(data.email)

        fields = data.model_dump(exclude={"password"})
        fields["password_hash"] = get_password_hash(data.password, self.settings)
        user = build(User, fields)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.db.rollback()
            raise DuplicateEmailError(data.email)
        self.db.refresh(user)

        logger.info(f"User registered: {user.email} (ID: {user.id}, role: {user.role.value})")
        return user

    def authenticate(self, email: str, password: str, client_ip: str = "unknown") -> User:
        """Check credentials first (401), then account state (403)."""
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for email: {email} from IP: {client_ip}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not user.is_active:
            logger.warning(f"Login attempt for inactive user: {email} (ID: {user.id}) from IP: {client_ip}")
            raise PermissionDeniedError("Account is deactivated")

        logger.info(f"Successful login: {user.email} (ID: {user.id}, role: {user.role.value}) from IP: {client_ip}")
        return user

    def update(self, user: User, changes: Dict[str, Any]) -> User:
        """Apply a partial update. The password is rehashed only when supplied."""
        changes = dict(changes)
        password = changes.pop("password", None)

        new_email = changes.get("email")
        if new_email is not None and new_email != user.email:
            if self.get_by_email(new_email) is not None:
                raise DuplicateEmailError(new_email)

        apply_changes(user, changes)
        if password is not None:
            user.password_hash = get_password_hash(password, self.settings)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEmailError(new_email or user.email)
        self.db.refresh(user)

        logger.info(f"User updated: {user.email} (ID: {user.id})")
        return user

    def delete(self, user: User) -> None:
        user_id = user.id
        self.db.delete(user)
        self.db.commit()
        logger.info(f"User deleted: ID {user_id}")

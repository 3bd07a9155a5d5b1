"""Pytest configuration and fixtures."""

import os

# Cheap hashing and a fixed key before cafe.core.config is first imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789-abcdefghijklmnop")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from cafe.core.config import Settings
from cafe.core.rbac import UserRole
from cafe.core.security import get_password_hash, issue_token
from cafe.db.session import Database
from cafe.main import create_app
from cafe.models.user import User

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PASSWORD = "password123"


@pytest.fixture(scope="function")
def settings(tmp_path) -> Settings:
    """Settings for one test, with uploads under a temporary directory."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        upload_dir=str(tmp_path / "uploads"),
        debug=True,
        rate_limit_enabled=False,
    )


@pytest.fixture(scope="function")
def database() -> Generator[Database, None, None]:
    """Create an isolated in-memory database."""
    database = Database(TEST_DATABASE_URL, poolclass=StaticPool)
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture(scope="function")
def db_session(database: Database) -> Generator[Session, None, None]:
    """Create a test database session."""
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(settings: Settings, database: Database) -> Generator[TestClient, None, None]:
    """Create a test client around an app bound to the test database."""
    # rate_limit_enabled=False in the settings fixture turns the limiter off
    app = create_app(settings=settings, database=database)
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def make_user(
    db: Session,
    email: str,
    role: UserRole = UserRole.CUSTOMER,
    password: str = TEST_PASSWORD,
    is_active: bool = True,
) -> User:
    user = User(
        first_name=role.value.title(),
        last_name="Tester",
        email=email,
        password_hash=get_password_hash(password),
        phone="0771234567",
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(user: User) -> dict:
    """Authorization header for *user*."""
    token = issue_token(user.id, user.email, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return make_user(db_session, "admin@example.com", UserRole.ADMIN)


@pytest.fixture
def staff_user(db_session: Session) -> User:
    return make_user(db_session, "staff@example.com", UserRole.STAFF)


@pytest.fixture
def customer_user(db_session: Session) -> User:
    return make_user(db_session, "customer@example.com", UserRole.CUSTOMER)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return bearer(admin_user)


@pytest.fixture
def staff_headers(staff_user: User) -> dict:
    return bearer(staff_user)


@pytest.fixture
def customer_headers(customer_user: User) -> dict:
    return bearer(customer_user)


@pytest.fixture
def auth_headers(staff_headers: dict) -> dict:
    """Default authenticated caller for endpoints that need any valid token."""
    return staff_headers

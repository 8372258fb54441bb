"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cms.database import Base, get_db
from cms.main import app
from cms.models.enums import Role
from cms.services.tokens import create_session_token
from cms.services.users import create_user


TEST_PASSWORD = "testpass123"


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id, email and password."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.password = TEST_PASSWORD


# Use test database - PostgreSQL when TEST_DATABASE_URL is set, SQLite locally
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory creating a user with the given role and returning bearer headers."""
    counter = {"n": 0}

    def _make_user(role: Role = Role.AUTHOR, email: str | None = None) -> AuthHeaders:
        counter["n"] += 1
        email = email or f"{role.value}{counter['n']}@example.com"
        name = f"{role.value.title()} {counter['n']}"
        user = create_user(db, email, TEST_PASSWORD, name, role=role)
        token = create_session_token(user.id, user.email, user.role)
        return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user.id, email=user.email)

    return _make_user


@pytest.fixture
def admin_headers(make_user):
    return make_user(Role.ADMIN)


@pytest.fixture
def editor_headers(make_user):
    return make_user(Role.EDITOR)


@pytest.fixture
def author_headers(make_user):
    return make_user(Role.AUTHOR)

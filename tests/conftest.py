"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from memoir.database import Base, get_db
from memoir.main import app
from memoir.models.user import User
from memoir.services.auth import get_password_hash


class SignedUpUser(dict):
    """Dict subclass that also stores the id of the signed-up user."""

    def __init__(self, *args, user_id: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id

    @property
    def email(self) -> str:
        return self["email"]

    @property
    def password(self) -> str:
        return self["password"]


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/memoir", "/memoir_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


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
def signed_up_user(client):
    """Sign up a user; the client keeps the auth cookie from the response."""
    credentials = {"email": "test@example.com", "password": "testpass123"}
    response = client.post(
        "/api/auth/signup",
        json={**credentials, "passwordConfirm": credentials["password"], "nickname": "Tester"},
    )
    assert response.status_code == 201
    assert "auth-token" in client.cookies

    profile = client.get("/api/user/profile")
    assert profile.status_code == 200

    return SignedUpUser(credentials, user_id=profile.json()["user"]["user_id"])


@pytest.fixture
def make_user(db):
    """Factory inserting users straight into the database."""

    def _make_user(email: str, password: str | None = "otherpass123", nickname: str = "Other"):
        user = User(
            email=email,
            nickname=nickname,
            password_hash=get_password_hash(password) if password else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user

"""Pytest configuration and fixtures."""

import os

# Cheap bcrypt cost for tests; must be set before settings are first read
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from user_service import models  # noqa: E402, F401
from user_service.database import Base, engine_options, get_db  # noqa: E402
from user_service.main import app  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's id and email."""

    def __init__(self, *args, user_id: str | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/user_service", "/user_service_test"
    )
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_options(SQLALCHEMY_DATABASE_URL))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
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
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    email = "test@example.com"
    response = client.post(
        "/api/v1/users/",
        json={"email": email, "password": "testpass123", "name": "Test User"},
    )
    assert response.status_code == 201
    data = response.json()["data"]
    token = data["token"]
    user_id = data["user"]["id"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=email)


@pytest.fixture
def other_auth_headers(client):
    """Register a second user for ownership checks."""
    email = "other@example.com"
    response = client.post(
        "/api/v1/users/",
        json={"email": email, "password": "otherpass123", "name": "Other User"},
    )
    assert response.status_code == 201
    data = response.json()["data"]
    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"}, user_id=data["user"]["id"], email=email
    )

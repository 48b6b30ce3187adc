"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from mealmoti import models  # noqa: F401
from mealmoti.database import Base, get_db
from mealmoti.main import app
from mealmoti.services.units import ensure_unit_catalog


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/mealmoti", "/mealmoti_test")
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
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()
    ensure_unit_catalog(session)

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
def register_user(client):
    """Factory registering a user and returning their auth headers."""

    def _register(email: str, name: str | None = None, password: str = "testpass123"):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201
        data = response.json()
        return AuthHeaders(
            {"Authorization": f"Bearer {data['access_token']}"},
            user_id=data["user"]["id"],
            email=data["user"]["email"],
        )

    return _register


@pytest.fixture
def auth_headers(register_user):
    """Create a user and return auth headers with user info."""
    return register_user("test@example.com", "Test User")


@pytest.fixture
def other_headers(register_user):
    """A second user to share resources with."""
    return register_user("friend@example.com", "Friend")


@pytest.fixture
def stranger_headers(register_user):
    """A user nothing is shared with."""
    return register_user("stranger@example.com", "Stranger")


@pytest.fixture
def shopping_list(client, auth_headers):
    """A list owned by the auth_headers user."""
    response = client.post("/api/v1/lists", headers=auth_headers, json={"name": "Weekly"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def product(client, auth_headers):
    """A general product."""
    response = client.post(
        "/api/v1/products",
        headers=auth_headers,
        json={"name": "Tomato", "is_general": True},
    )
    assert response.status_code == 201
    return response.json()

"""Pytest fixtures and configuration for karen tests."""

import os

# Keep the app's own engine off the filesystem; tests use their own session below.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
# Cheap hashing keeps the suite fast; the format is identical.
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from karen.database.database import Base
from karen.database.user_repository import UserRepository
from karen.database import models  # noqa: F401


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def user_repository(db_session: Session):
    """Create a UserRepository instance for testing."""
    return UserRepository(db_session)


@pytest.fixture
def sample_user_data():
    """Request body for the canonical test account."""
    return {
        "name": "Foo Bar",
        "email": "foo@bar.baz",
        "password": "foobarbaz",
    }


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from karen.api.app import app
    from karen.database.database import get_db

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def api_prefix():
    from karen.api.app import API_PREFIX
    return f"{API_PREFIX}/users"


@pytest.fixture
def created_user(test_client, api_prefix, sample_user_data):
    """Create the canonical account through the API and return its response body."""
    response = test_client.post(api_prefix, json=sample_user_data)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def session_headers(created_user):
    """Session header identifying the canonical account."""
    return {"User-ID": str(created_user["id"])}

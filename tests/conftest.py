"""
Test configuration and fixtures for Poopal.

Implements the transaction rollback pattern:
- Session-scoped engine (PostgreSQL when configured, in-memory SQLite otherwise)
- Function-scoped transactional session with automatic rollback
- TestClient with database dependency override
- Authenticated client fixtures
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from poopal.config import settings
from poopal.database import Base, get_db
from poopal.main import app
from poopal.models import User, Session as UserSession
from tests.factories import create_user, create_session


# =============================================================================
# Database Fixtures
# =============================================================================


def get_test_database_url() -> str:
    """
    Get the test database URL.

    Priority:
    1. TEST_DATABASE_URL environment variable
    2. DATABASE_URL if it points at PostgreSQL (transaction rollback ensures isolation)
    3. In-memory SQLite
    """
    if os.environ.get("TEST_DATABASE_URL"):
        return os.environ["TEST_DATABASE_URL"]

    main_url = os.environ.get("DATABASE_URL", "")
    if main_url and "postgresql" in main_url:
        return main_url

    return "sqlite://"


@pytest.fixture(scope="session")
def test_engine():
    """
    Create test database engine once per session.

    Tables are created at the start. In-memory SQLite shares one connection
    across threads so the TestClient sees the same database.
    """
    database_url = get_test_database_url()

    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url)

    Base.metadata.create_all(engine)

    yield engine

    if os.environ.get("CI") or database_url.startswith("sqlite"):
        Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """
    Provide a transactional database session that rolls back after each test.

    Service-level commits only end the session's inner transaction; the outer
    one on the connection is rolled back here, so nothing persists.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    TestingSessionLocal = sessionmaker(bind=connection)
    session = TestingSessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# =============================================================================
# TestClient Fixtures
# =============================================================================


def _override_get_db(db: Session):
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - managed by db fixture

    return override_get_db


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """TestClient with database dependency override."""
    app.dependency_overrides[get_db] = _override_get_db(db)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Authentication Fixtures
# =============================================================================


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user (password ``Testpassword123``)."""
    return create_user(db, email="testuser@example.com", username="testuser")


@pytest.fixture
def test_session(db: Session, test_user: User) -> UserSession:
    """Create a test session for the test user."""
    return create_session(db, test_user)


@pytest.fixture
def auth_client(
    db: Session, test_session: UserSession
) -> Generator[TestClient, None, None]:
    """
    Authenticated TestClient for the test user.

    Creates a separate TestClient instance to avoid cookie conflicts.
    """
    app.dependency_overrides[get_db] = _override_get_db(db)

    with TestClient(app) as test_client:
        test_client.cookies.set(settings.session_cookie_name, test_session.token)
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(test_session: UserSession) -> dict:
    """Bearer token header for the test user."""
    return {"Authorization": f"Bearer {test_session.token}"}


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_claude_service(monkeypatch):
    """
    Mock Claude service for the AI routes.

    Returns a mock service that can be configured per test.
    """
    from tests.fixtures.mocks import MockClaudeService

    mock_service = MockClaudeService()

    monkeypatch.setattr("poopal.api.ai.claude_service", mock_service)
    monkeypatch.setattr("poopal.api.chat.claude_service", mock_service)

    return mock_service


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "security: marks tests as security tests (deselect with '-m not security')",
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")

"""
JournalApp — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mocked DB, in-process API,
       client-side storage and session).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── app_settings:    Settings bound to a temporary SQLite file
    ├── app:             FastAPI app with its tables created
    ├── test_client:     HTTPX AsyncClient routed into the app
    ├── auth_headers:    Bearer header of a freshly registered account
    ├── storage:         LocalStorage in a temp directory
    ├── client_session:  ClientSession over that storage
    └── api_client:      JournalApiClient talking to the in-process app
"""

import os
import tempfile
from datetime import date, datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
# Why: journalapp.main builds a module-level app from the environment
_TEST_DIR = tempfile.mkdtemp(prefix="journalapp_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/import.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["JOURNAL_CLIENT_LOCAL_STORE_PATH"] = os.path.join(_TEST_DIR, "client.db")

from journalapp.client.api import JournalApiClient  # noqa: E402
from journalapp.client.config import ClientSettings  # noqa: E402
from journalapp.client.session import ClientSession  # noqa: E402
from journalapp.client.storage import LocalStorage  # noqa: E402
from journalapp.config import Settings  # noqa: E402
from journalapp.main import create_app  # noqa: E402
from journalapp.schemas.entry import EntryResponse  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_entry(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = entry
            result = await entry_service.get_entry(mock_db_session, owner_id, entry_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_entry():
    """Factory for EntryResponse objects as the API would return them."""

    def _make(title="Morning pages", content="", entry_date=None, entry_id=None):
        now = datetime.now(timezone.utc)
        return EntryResponse(
            id=entry_id or uuid4(),
            title=title,
            content=content,
            date=entry_date or date(2024, 3, 10),
            created_at=now,
            updated_at=now,
        )

    return _make


# ══════════════════════════════════════════════════════════════════════════
# Integration Fixtures (in-process app over a temp SQLite file)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path}/journal.db",
        jwt_secret="test-secret-not-for-production",
        rate_limit_requests=100000,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(app_settings):
    """
    A fresh application per test.

    ASGITransport does not run the lifespan, so tables are created here.
    """
    application = create_app(app_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient configured to talk to the FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _register(client: AsyncClient, username="writer", email="writer@example.com"):
    response = await client.post(
        "/api/users/register",
        json={"username": username, "email": email, "password": "secret123"},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def register_user():
    """Coroutine function registering an account; returns the auth body."""
    return _register


@pytest_asyncio.fixture
async def auth_headers(test_client):
    body = await _register(test_client)
    return {"Authorization": f"Bearer {body['token']}"}


# ══════════════════════════════════════════════════════════════════════════
# Client-Side Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def storage(tmp_path):
    store = LocalStorage(tmp_path / "client.db")
    yield store
    store.close()


@pytest.fixture
def client_session(storage):
    return ClientSession(storage)


@pytest.fixture
def client_settings():
    return ClientSettings(
        api_base_url="http://test",
        read_retry_attempts=2,
        read_retry_initial_wait=0,
        read_retry_max_wait=0,
    )


@pytest_asyncio.fixture
async def api_client(app, client_session, client_settings):
    client = JournalApiClient(client_session, client_settings, transport=ASGITransport(app=app))
    yield client
    await client.aclose()

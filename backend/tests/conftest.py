"""
Notes API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: fresh in-memory SQLite engine with the notes table
    ├── session_factory: async_sessionmaker bound to db_engine
    ├── db_session: one AsyncSession for service-level tests
    ├── mock_db_session: AsyncMock session (no database at all)
    ├── static_root: temporary frontend build directory
    └── test_client: HTTPX AsyncClient wired to a fresh app instance
"""

import os
import tempfile

# Settings are read at import time: configure the environment before any
# notes_api import so no test touches a real database.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["STATIC_ROOT"] = tempfile.mkdtemp(prefix="notes_api_test_static_")
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from notes_api.config import settings  # noqa: E402
from notes_api.database import create_tables, get_db_session  # noqa: E402


@pytest_asyncio.fixture
async def db_engine():
    """
    A private in-memory SQLite database per test.

    StaticPool keeps the single connection (and so the in-memory data)
    alive across every session opened during the test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_db_failure(mock_db_session):
            mock_db_session.execute.side_effect = SQLAlchemyError("down")
            with pytest.raises(DatabaseError):
                await note_service.find_all(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def static_root(tmp_path, monkeypatch):
    """Points settings.static_root at an empty temporary build directory."""
    root = tmp_path / "build"
    root.mkdir()
    monkeypatch.setattr(settings, "static_root", str(root))
    return root


@pytest_asyncio.fixture
async def test_client(session_factory, static_root):
    """
    Provides an async HTTP test client for endpoint testing.

    Every request gets its own session on the test's in-memory database,
    rolled back on error and closed afterwards, like get_db_session.
    App exceptions are turned into responses (raise_app_exceptions=False)
    so 500 responses can be asserted on.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
            assert response.status_code == 200
    """
    from notes_api.main import create_app

    app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

"""
Periferia Social Backend — Test Configuration (conftest.py)
============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for pure unit tests (no DB)
    ├── database:        real Database handle on a throwaway SQLite file
    ├── db_session:      a session on that database
    ├── create_user:     factory inserting a committed user
    ├── test_client:     HTTPX AsyncClient wired to an app using `database`
    └── login:           helper returning Authorization headers for a user
"""

import os
from datetime import date
from unittest.mock import AsyncMock, MagicMock

# Override settings BEFORE any application import reads them
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"  # minimum bcrypt cost keeps the suite fast
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENVIRONMENT"] = "test"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from periferia_social.database import Database  # noqa: E402
from periferia_social.main import create_app  # noqa: E402
from periferia_social.services.user_service import user_service  # noqa: E402

DEFAULT_PASSWORD = "123456"


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.get.return_value = user
        result = await service.get_profile(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database(tmp_path):
    """A Database on a fresh SQLite file with all tables created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'periferia_test.db'}")
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def create_user(database):
    """
    Factory that inserts and commits a user, returning the ORM row.

    Usage:
        juan = await create_user("juanp")
    """

    async def _create(alias: str, password: str = DEFAULT_PASSWORD, email: str = None):
        async with database.session() as session:
            user = await user_service.create_user(
                session,
                first_name=alias.capitalize(),
                last_name="Tester",
                email=email or f"{alias}@example.com",
                password=password,
                birth_date=date(1990, 1, 1),
                alias=alias,
            )
            await session.commit()
            return user

    return _create


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient routed straight into the FastAPI app (no server).

    The app is built with the test Database injected, so the lifespan is not
    needed to open a connection.
    """
    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def login(test_client):
    """Returns a coroutine producing bearer headers for the given credentials."""

    async def _login(email: str, password: str = DEFAULT_PASSWORD) -> dict:
        response = await test_client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login

"""
Nexio Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the test suite.
How:   Environment variables are set before any nexio import so the engine
       and settings singletons pick up the test database.

Fixture Hierarchy:
    database         fresh tables in a temporary SQLite file per test
    ├── db_session   an AsyncSession for storage-level tests
    └── test_client  httpx AsyncClient over ASGITransport
        ├── signup   coroutine creating a user through the API
        └── create_post coroutine creating a post through the API
    mock_db_session  AsyncMock session for service unit tests (no database)
    png_data_url     a tiny valid image as a data URL
"""

import base64
import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup (before any nexio import)
# ══════════════════════════════════════════════════════════════════════════

_test_dir = tempfile.mkdtemp(prefix="nexio_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_test_dir, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from nexio.database import Base, async_session_factory, dispose_engine, engine
import nexio.models  # noqa: F401

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@pytest_asyncio.fixture
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await dispose_engine()


@pytest_asyncio.fixture
async def db_session(database):
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient wired straight to the FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from nexio.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def signup(test_client):
    """
    Create an account through the API and return the user record with its
    token under "token".
    """
    counter = {"n": 0}

    async def _signup(name: str = None, email: str = None, password: str = "secret123"):
        counter["n"] += 1
        name = name or f"User {counter['n']}"
        email = email or f"user{counter['n']}@example.com"
        response = await test_client.post(
            "/api/auth/signup", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {**body["user"], "token": body["token"]}

    return _signup


@pytest.fixture
def create_post(test_client):
    async def _create_post(author_id: str, **fields):
        body = {
            "title": "Intro to X",
            "content": "Some content",
            "category": "Science",
            "authorId": author_id,
        }
        body.update(fields)
        response = await test_client.post("/api/posts", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create_post


def as_user(user_id: str) -> dict:
    """Identity headers for a request made as `user_id`."""
    return {"x-user-id": user_id}


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for service tests that patch out Storage.

    Usage:
        with patch("nexio.services.post_service.storage") as mock_storage:
            mock_storage.get_post = AsyncMock(return_value=None)
            await service.get_post(mock_db_session, "missing", None)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def png_data_url():
    return "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")

"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: SQLAlchemy engine and session over in-memory SQLite
    - Authentication Fixtures: registering users and building auth headers
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

# Ensure tests run without touching a database file or the network
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

API = "/api/v1"
DEFAULT_PASSWORD = "correct-horse-battery"


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite engine with all tables created.

    ``StaticPool`` keeps a single connection so every session sees the same
    in-memory database.
    """
    from taskboard_service.infra.database import create_tables

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for direct repository/loader tests."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Fresh application whose sessions come from the test engine."""
    from taskboard_service.app.main import create_app
    from taskboard_service.core.dependencies.database import get_db_session

    application = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Authentication Fixtures
# ============================================================================


@pytest.fixture
def register_user(client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Register an account through the API and log it in.

    Returns a coroutine function producing ``{"user": ..., "headers": ...}``.
    """

    async def _register(username: str, email: str | None = None) -> dict[str, Any]:
        email = email or f"{username}@example.com"
        response = await client.post(
            f"{API}/users/register",
            json={"username": username, "email": email, "password": DEFAULT_PASSWORD},
        )
        assert response.status_code == 201, response.text
        login = await client.post(
            f"{API}/users/login", json={"email": email, "password": DEFAULT_PASSWORD},
        )
        assert login.status_code == 200, login.text
        tokens = login.json()
        return {
            "user": response.json(),
            "tokens": tokens,
            "headers": {"Authorization": f"Bearer {tokens['access_token']}"},
        }

    return _register


@pytest.fixture
def auth_headers_for() -> Callable[..., dict[str, str]]:
    """Build an Authorization header for an arbitrary user id and role."""
    from taskboard_service.core.security import create_access_token

    def _headers(user_id: int, role: str = "user") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}

    return _headers

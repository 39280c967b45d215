"""
Shared test fixtures for the franchise SaaS test suite.

Every test gets its own application wired to a fresh in-memory SQLite
database (aiosqlite + StaticPool), so no state leaks between tests.
"""

import os
import uuid
from typing import AsyncGenerator

import pytest

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CORS_ORIGINS"] = '["*"]'

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from franchise_saas.core.config import Settings
from franchise_saas.core.security import TokenService
from franchise_saas.db.base import Base
from franchise_saas.main import create_app

TEST_PASSWORD = "password123"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        SECRET_KEY="test-secret-key-not-for-production",
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Build the app and create all tables on its engine."""
    application = create_app(settings)
    engine = application.state.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield application

    await engine.dispose()


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(app: FastAPI) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def token_service(app: FastAPI) -> TokenService:
    return app.state.token_service


@pytest.fixture
def register(async_client: AsyncClient):
    """Register a user through the API; the result also carries ready-made auth headers."""

    async def _register(
        email: str | None = None,
        role: str = "dealer",
        tenant_id: str = "tenant-1",
        password: str = TEST_PASSWORD,
        **profile: str,
    ) -> dict:
        body = {
            "email": email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "role": role,
            "tenant_id": tenant_id,
            **profile,
        }
        resp = await async_client.post("/api/v1/auth/register", json=body)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        data["headers"] = {"Authorization": f"Bearer {data['token']}"}
        return data

    return _register

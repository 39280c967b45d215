"""
Async SQLAlchemy engine & session factory (asyncpg driver in production,
aiosqlite for local runs and tests).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.pool import StaticPool

from franchise_saas.core.config import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    engine_args: dict[str, Any] = {
        "echo": False,
        "pool_pre_ping": True,
    }

    url = settings.DATABASE_URL
    if "postgresql" in url:
        engine_args.update(
            {
                "pool_size": 20,
                "max_overflow": 10,
                "pool_recycle": 300,
            }
        )
    elif url.startswith("sqlite") and (":memory:" in url or url.rstrip("/").endswith("://")):
        # A single shared connection keeps the in-memory database alive.
        engine_args.update(
            {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }
        )

    return create_async_engine(url, **engine_args)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

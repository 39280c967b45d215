"""
Franchise SaaS backend — application entry point.

This is the **only** file that assembles the app.  Settings are built once
and passed explicitly to the token service, the database engine, the rate
limiter and the middleware; business logic lives in ``services/``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from franchise_saas.api.v1.api import build_api_router
from franchise_saas.api.v1.endpoints import health
from franchise_saas.core.config import Settings, get_settings
from franchise_saas.core.exceptions import register_exception_handlers
from franchise_saas.core.rate_limit import build_limiter
from franchise_saas.core.security import TokenService
from franchise_saas.db.base import Base
from franchise_saas.db.session import build_engine, build_session_factory

# Ensure all models are imported so metadata.create_all can see them
from franchise_saas.models.checklist import Checklist, Task  # noqa: F401
from franchise_saas.models.user import User  # noqa: F401

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"app-{datetime.now(timezone.utc):%Y-%m-%d}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    settings = application.state.settings
    engine = application.state.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    application = FastAPI(
        title="Franchise SaaS",
        description="Multi-tenant franchise network backend: auth, profiles, checklists & KPI",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    engine = build_engine(settings)
    application.state.settings = settings
    application.state.engine = engine
    application.state.session_factory = build_session_factory(engine)
    application.state.token_service = TokenService(settings)

    limiter = build_limiter(settings)
    application.state.limiter = limiter

    # CORS
    allow_all = not settings.CORS_ORIGINS or "*" in settings.CORS_ORIGINS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Authorization", "X-Requested-With", "X-Tenant-ID"],
        expose_headers=["Content-Length", "X-Total-Count"],
        max_age=12 * 60 * 60,
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1; health probes are also served at the root
    application.include_router(build_api_router(limiter), prefix=settings.API_V1_PREFIX)
    application.include_router(health.router)

    return application


def _build_default_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)
    return create_app(settings)


app = _build_default_app()

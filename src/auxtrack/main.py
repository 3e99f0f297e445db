# File: src/auxtrack/main.py
"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from auxtrack.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="AuxTrack starting up", timestamp=start_time.isoformat())

    from auxtrack.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="AuxTrack shutting down gracefully")


def _setup_middleware(app: FastAPI, environment: str, session_secret_key: str) -> None:
    """Configure all middleware in correct order."""
    from auxtrack.middleware.logging import RequestIDMiddleware
    from auxtrack.middleware.sentry import SentryContextMiddleware

    # Last added = first executed: RequestID -> Session -> SentryContext -> app
    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key,
        max_age=14 * 24 * 60 * 60,
        https_only=environment == "production",
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from auxtrack.api.admin import router as admin_router
    from auxtrack.api.analytics import router as analytics_router
    from auxtrack.api.auth import router as auth_router
    from auxtrack.api.aux import router as aux_router
    from auxtrack.api.health import router as health_router

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(aux_router)
    app.include_router(analytics_router)
    app.include_router(admin_router)


def create_app() -> FastAPI:
    """Application factory for AuxTrack."""
    app = FastAPI(
        title="AuxTrack API",
        description="Employee AUX status tracking and productivity reporting",
        version="0.1.0",
        lifespan=lifespan,
    )

    from auxtrack.core.exception_handlers import register_exception_handlers
    from auxtrack.core.sentry import init_sentry

    init_sentry()
    register_exception_handlers(app)

    session_secret_key = os.getenv("SESSION_SECRET_KEY", "dev-secret-key-change-in-production")
    environment = os.getenv("ENVIRONMENT", "development")

    if environment == "production" and session_secret_key.startswith("dev-"):
        logger.warning("app.insecure_secret", message="SESSION_SECRET_KEY is the development default")

    _setup_middleware(app, environment, session_secret_key)
    _register_routers(app)

    logger.info("app.configured", message="FastAPI application created successfully")

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "auxtrack.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

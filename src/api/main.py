"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, routers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryTokenStore, InMemoryUserStore
from src.adapters.repository.postgres import PostgresTokenStore, PostgresUserStore, run_migrations
from src.adapters.security.clock import SystemClock
from src.api.responses import install_exception_handlers
from src.api.v1 import router as v1_router
from src.api.web import router as web_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account API v1 - Register, log in, verify email and reset passwords",
    },
    {
        "name": "web",
        "description": "Endpoints reached from emailed links and browser forms",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and stores on startup
    - Runs migrations on startup
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "memory":
        logger.warning("Using in-memory storage; data is lost on restart")
        app.state.user_store = InMemoryUserStore()
        app.state.token_store = InMemoryTokenStore(
            app.state.user_store, SystemClock(), ttl_seconds=settings.reset_token_ttl_seconds
        )
    else:
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

        app.state.user_store = PostgresUserStore(pool)
        app.state.token_store = PostgresTokenStore(
            pool, ttl_seconds=settings.reset_token_ttl_seconds
        )
    app.state.pool = pool

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="verigate",
    description="Account Verification API - Signed email verification links and token based password reset",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

install_exception_handlers(app)

app.include_router(v1_router, prefix="/v1")
app.include_router(web_router)


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}

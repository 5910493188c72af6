"""FastAPI application factory.

Main entry point for the Puzzle Host Web API. Run it with the CLI
(``puzzlehost serve``) or directly:

    uvicorn puzzlehost.web.api:create_app --factory --port 8888
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from puzzlehost import __version__
from puzzlehost.config.app_config import AppConfig, load_app_config
from puzzlehost.db.data_access import DataAccess, start_session
from puzzlehost.web.auth import AuthMiddleware, make_authorization
from puzzlehost.web.server import setup_server

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    logger.info(
        "api_startup",
        version=__version__,
        database=str(app.state.data_access.database.path),
    )
    yield
    # Shutdown: end open event streams, drop any scratch database
    await app.state.event_bus.close_all()
    app.state.data_access.close()
    logger.info("api_shutdown")


def create_app(
    data_access: DataAccess | None = None,
    auth_middleware: AuthMiddleware | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        data_access: Storage to use; by default a session is started on
            the configured database connection
        auth_middleware: Defaults to header-based authorization
        config: Defaults to load_app_config()

    Returns:
        Configured FastAPI app instance
    """
    config = config or load_app_config()

    if data_access is None:
        data_access = start_session(config.database.resolve_connection())

    app = FastAPI(
        title="Puzzle Host API",
        description="Create puzzles, manage their ordered answers and check solutions",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # NOTE: this CORS setup gets clients started but is not a secure default.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allow_origins,
        allow_methods=config.cors.allow_methods,
        allow_headers=config.cors.allow_headers,
    )

    setup_server(
        app,
        auth_middleware or make_authorization(config.auth),
        data_access,
    )

    return app

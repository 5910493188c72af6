"""Server setup: wires auth, data access and routes into an application.

Usage:
    app = FastAPI()
    setup_server(app, make_authorization(), start_session())
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from puzzlehost.db.data_access import DataAccess
from puzzlehost.web.auth import AuthMiddleware
from puzzlehost.web.events import PuzzleEventBus
from puzzlehost.web.routes import (
    health_router,
    puzzle_answers_router,
    puzzle_events_router,
    puzzles_router,
    query_puzzle_router,
    user_puzzles_router,
)

logger = structlog.get_logger(__name__)


async def unsupported_method_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Answer 501 for methods a known route does not implement.

    OPTIONS requests that CORS preflight handling did not answer get a 204
    listing the allowed methods. All other HTTP errors keep FastAPI's
    default JSON handling.
    """
    if exc.status_code != status.HTTP_405_METHOD_NOT_ALLOWED:
        return await http_exception_handler(request, exc)

    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=exc.headers)

    logger.info(
        "method_not_implemented",
        method=request.method,
        path=request.url.path,
    )
    return PlainTextResponse(
        "Not Implemented",
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        headers=exc.headers,
    )


def setup_server(
    app: FastAPI,
    auth_middleware: AuthMiddleware,
    data_access: DataAccess,
) -> FastAPI:
    """Attach auth, data access and every route to an application.

    Args:
        app: Application to configure (must not have started yet)
        auth_middleware: Sets request.state.authenticated_user
        data_access: Storage used by all routes

    Returns:
        The same app, for chaining
    """
    app.add_middleware(BaseHTTPMiddleware, dispatch=auth_middleware)

    app.state.data_access = data_access
    app.state.event_bus = PuzzleEventBus()

    app.add_exception_handler(StarletteHTTPException, unsupported_method_handler)

    app.include_router(health_router)
    app.include_router(puzzles_router)
    app.include_router(user_puzzles_router)
    app.include_router(puzzle_answers_router)
    app.include_router(query_puzzle_router)
    app.include_router(puzzle_events_router)

    logger.debug("server.setup_complete", database=str(data_access.database.path))
    return app

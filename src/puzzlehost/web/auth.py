"""Authorization middleware.

An auth middleware is an HTTP middleware function
``async (request, call_next) -> Response`` that sets
``request.state.authenticated_user`` to a user id (or None) before the
request reaches the routes. The server accepts any such function, so
real identity checks can replace the defaults here.

NOTE: the default trusts a request header. That is one way to get started
with user identification, not an authentication scheme.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response

from puzzlehost.config.app_config import AuthConfig

CallNext = Callable[[Request], Awaitable[Response]]
AuthMiddleware = Callable[[Request, CallNext], Awaitable[Response]]


def make_authorization(config: AuthConfig | None = None) -> AuthMiddleware:
    """Build the default middleware.

    The user id comes from the configured header; requests without it get
    config.default_user (which may be None).
    """
    config = config or AuthConfig()

    async def authorization(request: Request, call_next: CallNext) -> Response:
        user = request.headers.get(config.user_header) or config.default_user
        request.state.authenticated_user = user
        return await call_next(request)

    return authorization


@dataclass
class UserHolder:
    """Mutable slot for the user a static_user middleware reports."""

    id: str | None = None


def static_user(holder: UserHolder) -> AuthMiddleware:
    """Build middleware that authenticates every request as holder.id.

    The holder is read per request, so changing holder.id switches users
    for subsequent requests.
    """

    async def authorization(request: Request, call_next: CallNext) -> Response:
        request.state.authenticated_user = holder.id
        return await call_next(request)

    return authorization


def get_authenticated_user(request: Request) -> str | None:
    """Read the user id set by the auth middleware."""
    return getattr(request.state, "authenticated_user", None)

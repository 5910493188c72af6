"""Web API for puzzle hosting."""

from puzzlehost.web.server import setup_server

__all__ = ["setup_server"]

"""Route handlers for the Web API."""

from puzzlehost.web.routes.health import router as health_router
from puzzlehost.web.routes.puzzle_answers import router as puzzle_answers_router
from puzzlehost.web.routes.puzzle_events import router as puzzle_events_router
from puzzlehost.web.routes.puzzles import router as puzzles_router
from puzzlehost.web.routes.query_puzzle import router as query_puzzle_router
from puzzlehost.web.routes.user_puzzles import router as user_puzzles_router

__all__ = [
    "health_router",
    "puzzle_answers_router",
    "puzzle_events_router",
    "puzzles_router",
    "query_puzzle_router",
    "user_puzzles_router",
]

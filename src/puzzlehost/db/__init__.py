"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Repositories for puzzles and ordered puzzle answers
- DataAccess, the object injected into the web server
"""

from puzzlehost.db.data_access import DataAccess, start_session, testing_start
from puzzlehost.db.database import Database, UnsupportedConnectionError

__all__ = [
    "DataAccess",
    "Database",
    "UnsupportedConnectionError",
    "start_session",
    "testing_start",
]

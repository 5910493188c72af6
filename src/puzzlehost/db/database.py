"""SQLite database connection and schema management.

Provides connection management and schema initialization for puzzle storage.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

logger = structlog.get_logger(__name__)

# Default database location
DEFAULT_DB_PATH = Path("db/puzzlehost.db")

SQLITE_SCHEME = "sqlite://"

IN_MEMORY = (SQLITE_SCHEME, ":memory:", "sqlite:///:memory:")


class UnsupportedConnectionError(Exception):
    """Raised when a connection string does not name a SQLite database."""

    def __init__(self, connection: str):
        self.connection = connection
        super().__init__(f"Unsupported database connection: '{connection}'")


def parse_connection(connection: str | None) -> Path | None:
    """Turn a connection string into a database file path.

    Examples:
        None -> db/puzzlehost.db
        "sqlite:////tmp/p.db" -> /tmp/p.db
        "sqlite:///relative.db" -> relative.db
        "sqlite://", "sqlite:///:memory:", ":memory:" -> None
            (the caller provides a scratch file)
        "data/p.db" -> data/p.db

    Raises:
        UnsupportedConnectionError: For any other URL scheme (postgres://...)
    """
    if connection is None:
        return DEFAULT_DB_PATH

    connection = connection.strip()
    if connection in IN_MEMORY:
        return None

    if connection.startswith(SQLITE_SCHEME):
        # sqlite:////abs/path is absolute, sqlite:///rel is relative
        rest = connection[len(SQLITE_SCHEME):]
        if rest.startswith("//"):
            return Path(rest[1:])
        return Path(rest.lstrip("/"))

    if "://" in connection or not connection:
        raise UnsupportedConnectionError(connection)

    return Path(connection)


class Database:
    """A SQLite database file with the puzzle schema."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def init(self) -> None:
        """Initialize database with schema.

        Creates the database file and all required tables if they don't exist.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with self.connect() as conn:
            _create_schema(conn)

        logger.info("database.initialized", path=str(self.path))

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection as context manager.

        Yields:
            SQLite connection with row factory set to sqlite3.Row

        Example:
            with db.connect() as conn:
                rows = conn.execute("SELECT * FROM puzzles").fetchall()
        """
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")

        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def check_health(self) -> dict[str, str]:
        """Run a trivial query and report whether the database answers."""
        try:
            with self.connect() as conn:
                conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as e:
            logger.warning("database.unhealthy", path=str(self.path), error=str(e))
            return {"status": "unhealthy", "error": str(e)}

        return {"status": "healthy"}


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS puzzles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            owner TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        -- answer_index is not UNIQUE: reorders shift rows one at a time
        CREATE TABLE IF NOT EXISTS puzzle_answers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            puzzle_id INTEGER NOT NULL REFERENCES puzzles(id) ON DELETE CASCADE,
            value TEXT NOT NULL,
            answer_index INTEGER NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        CREATE INDEX IF NOT EXISTS idx_puzzles_owner ON puzzles(owner);
        CREATE INDEX IF NOT EXISTS idx_answers_puzzle
            ON puzzle_answers(puzzle_id, answer_index);
        """
    )

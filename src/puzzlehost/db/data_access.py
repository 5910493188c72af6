"""Pluggable data-access layer handed to the web server.

Usage:
    data_access = start_session("sqlite:///db/puzzlehost.db")
    puzzle = data_access.puzzles.create("my first puzzle", owner="123")

    # isolated database for tests
    data_access, teardown = testing_start()
    ...
    teardown()
"""

from __future__ import annotations

import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import structlog

from puzzlehost.config.app_config import load_app_config
from puzzlehost.db.answers_repository import AnswerRepository
from puzzlehost.db.database import Database, parse_connection
from puzzlehost.db.puzzles_repository import PuzzleRepository

logger = structlog.get_logger(__name__)


@dataclass
class DataAccess:
    """Repositories bound to one database."""

    database: Database
    # temp directory backing the database; removed by close()
    scratch_dir: Path | None = None
    puzzles: PuzzleRepository = field(init=False)
    answers: AnswerRepository = field(init=False)

    def __post_init__(self):
        self.puzzles = PuzzleRepository(self.database)
        self.answers = AnswerRepository(self.database)

    def close(self) -> None:
        """Delete the scratch database, if this session made one."""
        if self.scratch_dir is None:
            return

        shutil.rmtree(self.scratch_dir, ignore_errors=True)
        logger.debug("data_access.scratch_removed", path=str(self.scratch_dir))
        self.scratch_dir = None


def start_session(connection: str | None = None) -> DataAccess:
    """Open (creating if needed) the database named by a connection string.

    Args:
        connection: sqlite connection string or file path. None falls back
            to DB_CONNECTION, then to database.connection from config.

    Returns:
        DataAccess with an initialized schema

    Raises:
        UnsupportedConnectionError: If the connection is not SQLite
        sqlite3.Error: If the database cannot be opened
    """
    if connection is None:
        connection = load_app_config().database.resolve_connection()

    path = parse_connection(connection)
    scratch_dir = None
    if path is None:
        # sqlite:// has no file; back it with a scratch file until close()
        scratch_dir = Path(tempfile.mkdtemp(prefix="puzzlehost-"))
        path = scratch_dir / "puzzlehost.db"

    database = Database(path)
    database.init()

    logger.info("data_access.session_started", path=str(path))
    return DataAccess(database, scratch_dir=scratch_dir)


def testing_start() -> tuple[DataAccess, Callable[[], None]]:
    """Create an isolated throwaway database.

    Returns:
        (data_access, teardown) where teardown deletes the database
    """
    tmp_dir = Path(tempfile.mkdtemp(prefix="puzzlehost-test-"))
    database = Database(tmp_dir / "puzzlehost.db")
    database.init()

    data_access = DataAccess(database, scratch_dir=tmp_dir)
    return data_access, data_access.close


# keep pytest from collecting this when a test module imports it
testing_start.__test__ = False

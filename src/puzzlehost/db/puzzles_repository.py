"""Repository for the puzzles table.

Provides CRUD operations for puzzles and lookup by owner.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from puzzlehost.db.database import Database

logger = structlog.get_logger(__name__)


@dataclass
class PuzzleRecord:
    """Puzzle record from database."""

    id: int
    name: str
    owner: str
    created_at: str


class PuzzleRepository:
    """CRUD access to puzzles."""

    def __init__(self, db: Database):
        self._db = db

    def create(self, name: str, owner: str) -> PuzzleRecord:
        """Insert a new puzzle.

        Args:
            name: Puzzle display name
            owner: User id of the creator

        Returns:
            The stored PuzzleRecord
        """
        with self._db.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO puzzles (name, owner) VALUES (?, ?)",
                (name, owner),
            )
            row = conn.execute(
                "SELECT * FROM puzzles WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()

        record = _row_to_record(row)
        logger.debug("puzzles.created", puzzle_id=record.id, owner=owner)
        return record

    def get(self, puzzle_id: int) -> PuzzleRecord | None:
        """Get puzzle by ID.

        Returns:
            PuzzleRecord if found, None otherwise
        """
        with self._db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM puzzles WHERE id = ?", (puzzle_id,)
            ).fetchone()

        if row is None:
            return None

        return _row_to_record(row)

    def list_for_owner(self, owner: str) -> list[PuzzleRecord]:
        """Get all puzzles owned by a user, in creation order."""
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM puzzles WHERE owner = ? ORDER BY id ASC", (owner,)
            ).fetchall()

        return [_row_to_record(row) for row in rows]

    def rename(self, puzzle_id: int, name: str) -> bool:
        """Set a new puzzle name.

        Returns:
            True if updated, False if not found
        """
        with self._db.connect() as conn:
            cursor = conn.execute(
                "UPDATE puzzles SET name = ? WHERE id = ?", (name, puzzle_id)
            )

        updated = cursor.rowcount > 0
        if updated:
            logger.debug("puzzles.renamed", puzzle_id=puzzle_id)

        return updated

    def delete(self, puzzle_id: int) -> bool:
        """Delete puzzle by ID, along with its answers.

        Returns:
            True if deleted, False if not found
        """
        with self._db.connect() as conn:
            cursor = conn.execute("DELETE FROM puzzles WHERE id = ?", (puzzle_id,))

        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug("puzzles.deleted", puzzle_id=puzzle_id)

        return deleted


def _row_to_record(row) -> PuzzleRecord:
    """Convert database row to PuzzleRecord."""
    return PuzzleRecord(
        id=row["id"],
        name=row["name"],
        owner=row["owner"],
        created_at=row["created_at"],
    )

"""Repository for the puzzle_answers table.

Answers of a puzzle form an ordered list. The answer_index values of a
puzzle are always exactly 0..n-1:

- create at index i: answers with index >= i move up by one
- move from old to new: answers between the two positions shift toward old
- delete at index i: answers with index > i move down by one

Indexes beyond the end are clamped. Every reorder runs inside a single
BEGIN IMMEDIATE transaction so concurrent writers serialize.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import structlog

from puzzlehost.db.database import Database

logger = structlog.get_logger(__name__)


@dataclass
class AnswerRecord:
    """Puzzle answer record from database."""

    id: int
    puzzle_id: int
    value: str
    answer_index: int


class InvalidAnswerIndexError(Exception):
    """Raised when an answer index is negative."""

    def __init__(self, answer_index: int):
        self.answer_index = answer_index
        super().__init__(f"Answer index must be >= 0, got {answer_index}")


class AnswerRepository:
    """Ordered answer storage for puzzles."""

    def __init__(self, db: Database):
        self._db = db

    def create(
        self,
        puzzle_id: int,
        value: str,
        answer_index: int | None = None,
    ) -> AnswerRecord:
        """Insert an answer at a position, shifting later answers up.

        Args:
            puzzle_id: Owning puzzle (must exist)
            value: Answer value
            answer_index: Target position; None appends at the end

        Returns:
            The stored AnswerRecord

        Raises:
            InvalidAnswerIndexError: If answer_index is negative
        """
        if answer_index is not None and answer_index < 0:
            raise InvalidAnswerIndexError(answer_index)

        with self._db.connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            count = _count(conn, puzzle_id)
            index = count if answer_index is None else min(answer_index, count)

            conn.execute(
                """
                UPDATE puzzle_answers SET answer_index = answer_index + 1
                WHERE puzzle_id = ? AND answer_index >= ?
                """,
                (puzzle_id, index),
            )
            cursor = conn.execute(
                """
                INSERT INTO puzzle_answers (puzzle_id, value, answer_index)
                VALUES (?, ?, ?)
                """,
                (puzzle_id, value, index),
            )
            answer_id = cursor.lastrowid

        logger.debug(
            "answers.created",
            answer_id=answer_id,
            puzzle_id=puzzle_id,
            answer_index=index,
            shifted=count - index,
        )
        return AnswerRecord(
            id=answer_id, puzzle_id=puzzle_id, value=value, answer_index=index
        )

    def get(self, answer_id: int) -> AnswerRecord | None:
        """Get answer by ID.

        Returns:
            AnswerRecord if found, None otherwise
        """
        with self._db.connect() as conn:
            row = _fetch(conn, answer_id)

        if row is None:
            return None

        return _row_to_record(row)

    def list_for_puzzle(self, puzzle_id: int) -> list[AnswerRecord]:
        """Get all answers of a puzzle ordered by answer_index."""
        with self._db.connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM puzzle_answers
                WHERE puzzle_id = ? ORDER BY answer_index ASC
                """,
                (puzzle_id,),
            ).fetchall()

        return [_row_to_record(row) for row in rows]

    def count_for_puzzle(self, puzzle_id: int) -> int:
        """Number of answers stored for a puzzle."""
        with self._db.connect() as conn:
            return _count(conn, puzzle_id)

    def update(
        self,
        answer_id: int,
        value: str | None = None,
        answer_index: int | None = None,
    ) -> bool:
        """Change an answer's value and/or move it to a new position.

        Moving to a larger index pulls the answers in (old, new] down by one;
        moving to a smaller index pushes the answers in [new, old) up by one.

        Returns:
            True if updated, False if not found

        Raises:
            InvalidAnswerIndexError: If answer_index is negative
        """
        if answer_index is not None and answer_index < 0:
            raise InvalidAnswerIndexError(answer_index)

        with self._db.connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            row = _fetch(conn, answer_id)
            if row is None:
                return False

            if value is not None:
                conn.execute(
                    "UPDATE puzzle_answers SET value = ? WHERE id = ?",
                    (value, answer_id),
                )

            if answer_index is not None:
                puzzle_id = row["puzzle_id"]
                old = row["answer_index"]
                new = min(answer_index, _count(conn, puzzle_id) - 1)
                _move(conn, answer_id, puzzle_id, old, new)

        logger.debug(
            "answers.updated",
            answer_id=answer_id,
            value_changed=value is not None,
            answer_index=answer_index,
        )
        return True

    def delete(self, answer_id: int) -> bool:
        """Delete answer by ID, closing the gap it leaves.

        Returns:
            True if deleted, False if not found
        """
        with self._db.connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            row = _fetch(conn, answer_id)
            if row is None:
                return False

            conn.execute("DELETE FROM puzzle_answers WHERE id = ?", (answer_id,))
            conn.execute(
                """
                UPDATE puzzle_answers SET answer_index = answer_index - 1
                WHERE puzzle_id = ? AND answer_index > ?
                """,
                (row["puzzle_id"], row["answer_index"]),
            )

        logger.debug(
            "answers.deleted",
            answer_id=answer_id,
            puzzle_id=row["puzzle_id"],
            answer_index=row["answer_index"],
        )
        return True


def _move(
    conn: sqlite3.Connection,
    answer_id: int,
    puzzle_id: int,
    old: int,
    new: int,
) -> None:
    """Move one answer from old to new, shifting the answers in between."""
    if new == old:
        return

    if new > old:
        conn.execute(
            """
            UPDATE puzzle_answers SET answer_index = answer_index - 1
            WHERE puzzle_id = ? AND answer_index > ? AND answer_index <= ?
            """,
            (puzzle_id, old, new),
        )
    else:
        conn.execute(
            """
            UPDATE puzzle_answers SET answer_index = answer_index + 1
            WHERE puzzle_id = ? AND answer_index >= ? AND answer_index < ?
            """,
            (puzzle_id, new, old),
        )

    conn.execute(
        "UPDATE puzzle_answers SET answer_index = ? WHERE id = ?", (new, answer_id)
    )
    logger.debug("answers.reordered", puzzle_id=puzzle_id, old=old, new=new)


def _fetch(conn: sqlite3.Connection, answer_id: int) -> sqlite3.Row | None:
    return conn.execute(
        "SELECT * FROM puzzle_answers WHERE id = ?", (answer_id,)
    ).fetchone()


def _count(conn: sqlite3.Connection, puzzle_id: int) -> int:
    return conn.execute(
        "SELECT COUNT(*) FROM puzzle_answers WHERE puzzle_id = ?", (puzzle_id,)
    ).fetchone()[0]


def _row_to_record(row) -> AnswerRecord:
    """Convert database row to AnswerRecord."""
    return AnswerRecord(
        id=row["id"],
        puzzle_id=row["puzzle_id"],
        value=row["value"],
        answer_index=row["answer_index"],
    )

"""Ownership checks shared by the puzzle and answer routes.

Every protected route checks, in order: id format, authenticated user,
existence, ownership. The status code sent for a missing user and for a
non-owner is part of each route's public contract and differs between
routes, so each route names its AccessPolicy.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from fastapi import HTTPException, status

from puzzlehost.db.answers_repository import AnswerRecord
from puzzlehost.db.data_access import DataAccess
from puzzlehost.db.puzzles_repository import PuzzleRecord
from puzzlehost.utils.validators import InvalidIdError, parse_entity_id

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AccessPolicy:
    """Status codes a route answers with when access is refused."""

    missing_user: int
    not_owner: int


# GET/DELETE /api/puzzle/{id}, POST /api/puzzle, /api/puzzleEvents
PUZZLE_READ = AccessPolicy(
    missing_user=status.HTTP_401_UNAUTHORIZED,
    not_owner=status.HTTP_403_FORBIDDEN,
)

# PUT /api/puzzle/{id}
PUZZLE_WRITE = AccessPolicy(
    missing_user=status.HTTP_403_FORBIDDEN,
    not_owner=status.HTTP_401_UNAUTHORIZED,
)

# every /api/puzzleAnswer route
ANSWER_ACCESS = AccessPolicy(
    missing_user=status.HTTP_403_FORBIDDEN,
    not_owner=status.HTTP_401_UNAUTHORIZED,
)

# GET /api/userPuzzles lists only the caller's own puzzles
USER_PUZZLES = AccessPolicy(
    missing_user=status.HTTP_403_FORBIDDEN,
    not_owner=status.HTTP_403_FORBIDDEN,
)


def parse_id_or_404(raw: str | int | None, kind: str) -> int:
    """Parse an id, answering 404 when it cannot name anything."""
    try:
        return parse_entity_id(raw)
    except InvalidIdError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{kind} '{raw}' not found",
        )


def require_user(user: str | None, policy: AccessPolicy) -> str:
    """Return the authenticated user or refuse the request."""
    if not user:
        raise HTTPException(
            status_code=policy.missing_user,
            detail="No authenticated user",
        )
    return user


def load_owned_puzzle(
    data_access: DataAccess,
    puzzle_id: int,
    user: str,
    policy: AccessPolicy,
) -> PuzzleRecord:
    """Fetch a puzzle the user owns.

    Raises:
        HTTPException: 404 if missing, policy.not_owner if owned by someone else
    """
    puzzle = data_access.puzzles.get(puzzle_id)
    if puzzle is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Puzzle '{puzzle_id}' not found",
        )

    if puzzle.owner != user:
        logger.info("access.denied", puzzle_id=puzzle_id, user=user)
        raise HTTPException(
            status_code=policy.not_owner,
            detail=f"Puzzle '{puzzle_id}' belongs to another user",
        )

    return puzzle


def load_owned_answer(
    data_access: DataAccess,
    answer_id: int,
    user: str,
    policy: AccessPolicy,
) -> AnswerRecord:
    """Fetch an answer whose puzzle the user owns."""
    answer = data_access.answers.get(answer_id)
    if answer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Answer '{answer_id}' not found",
        )

    load_owned_puzzle(data_access, answer.puzzle_id, user, policy)
    return answer

"""Answer checking endpoint.

GET /api/queryPuzzle/{puzzle_id}/{answer1}/{answer2}/... compares the
submitted values, in order, against the puzzle's answers ordered by
answerIndex. Anyone may query a puzzle; ownership is not required.
"""

from http import HTTPStatus

import structlog
from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse

from puzzlehost.db.data_access import DataAccess
from puzzlehost.utils.validators import split_answer_path
from puzzlehost.web.access import parse_id_or_404
from puzzlehost.web.deps import DataAccessDep

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/queryPuzzle", tags=["query"])

CORRECT = "Correct"
INCORRECT = "Incorrect"


def check_answers(data_access: DataAccess, puzzle_id: int, submitted: list[str]) -> bool:
    """True when submitted matches the stored answers exactly, in order."""
    expected = [a.value for a in data_access.answers.list_for_puzzle(puzzle_id)]
    return submitted == expected


async def _query(data_access: DataAccess, puzzle_id: str, answers: str) -> PlainTextResponse:
    pid = parse_id_or_404(puzzle_id, "Puzzle")
    if data_access.puzzles.get(pid) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Puzzle '{pid}' not found",
        )

    submitted = split_answer_path(answers)
    correct = check_answers(data_access, pid, submitted)
    logger.info("puzzle_queried", puzzle_id=pid, submitted=len(submitted), correct=correct)

    if correct:
        return PlainTextResponse(CORRECT, status_code=status.HTTP_200_OK)
    return PlainTextResponse(INCORRECT, status_code=HTTPStatus.UNPROCESSABLE_ENTITY)


@router.get("/{puzzle_id}", response_class=PlainTextResponse)
async def query_puzzle_without_answers(
    puzzle_id: str,
    data_access: DataAccessDep,
) -> PlainTextResponse:
    """Check an empty submission."""
    return await _query(data_access, puzzle_id, "")


@router.get("/{puzzle_id}/{answers:path}", response_class=PlainTextResponse)
async def query_puzzle(
    puzzle_id: str,
    answers: str,
    data_access: DataAccessDep,
) -> PlainTextResponse:
    """Check submitted answers; 200 "Correct" or 422 "Incorrect"."""
    return await _query(data_access, puzzle_id, answers)

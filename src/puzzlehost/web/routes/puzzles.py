"""Puzzle endpoints."""

import structlog
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import PlainTextResponse

from puzzlehost.web.access import (
    PUZZLE_READ,
    PUZZLE_WRITE,
    load_owned_puzzle,
    parse_id_or_404,
    require_user,
)
from puzzlehost.web.deps import (
    DataAccessDep,
    EventBusDep,
    UserDep,
    parse_body,
    read_payload,
)
from puzzlehost.web.events import PuzzleEvent, PuzzleEventType
from puzzlehost.web.schemas import PuzzleCreate, PuzzleResponse, PuzzleUpdate

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/puzzle", tags=["puzzles"])


@router.post("", status_code=status.HTTP_201_CREATED, response_class=PlainTextResponse)
async def create_puzzle(
    request: Request,
    data_access: DataAccessDep,
    user: UserDep,
) -> PlainTextResponse:
    """Create a puzzle owned by the current user.

    The response body is the new puzzle id as plain text.
    """
    body = parse_body(PuzzleCreate, await read_payload(request))
    owner = require_user(user, PUZZLE_READ)

    puzzle = data_access.puzzles.create(body.name, owner)
    logger.info("puzzle_created", puzzle_id=puzzle.id, owner=owner)

    return PlainTextResponse(str(puzzle.id), status_code=status.HTTP_201_CREATED)


@router.get("/{puzzle_id}", response_model=PuzzleResponse)
async def get_puzzle(
    puzzle_id: str,
    data_access: DataAccessDep,
    user: UserDep,
) -> PuzzleResponse:
    """Get a puzzle owned by the current user."""
    pid = parse_id_or_404(puzzle_id, "Puzzle")
    owner = require_user(user, PUZZLE_READ)
    puzzle = load_owned_puzzle(data_access, pid, owner, PUZZLE_READ)

    return PuzzleResponse.from_record(puzzle)


@router.put("/{puzzle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def rename_puzzle(
    puzzle_id: str,
    request: Request,
    data_access: DataAccessDep,
    events: EventBusDep,
    user: UserDep,
) -> Response:
    """Rename a puzzle."""
    body = parse_body(PuzzleUpdate, await read_payload(request))
    pid = parse_id_or_404(puzzle_id, "Puzzle")
    owner = require_user(user, PUZZLE_WRITE)
    load_owned_puzzle(data_access, pid, owner, PUZZLE_WRITE)

    data_access.puzzles.rename(pid, body.name)
    await events.publish(
        PuzzleEvent(PuzzleEventType.PUZZLE_RENAMED, pid, {"name": body.name})
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{puzzle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_puzzle(
    puzzle_id: str,
    data_access: DataAccessDep,
    events: EventBusDep,
    user: UserDep,
) -> Response:
    """Delete a puzzle and all its answers."""
    pid = parse_id_or_404(puzzle_id, "Puzzle")
    owner = require_user(user, PUZZLE_READ)
    load_owned_puzzle(data_access, pid, owner, PUZZLE_READ)

    data_access.puzzles.delete(pid)
    logger.info("puzzle_deleted", puzzle_id=pid, owner=owner)

    await events.publish(PuzzleEvent(PuzzleEventType.PUZZLE_DELETED, pid))
    await events.close(pid)

    return Response(status_code=status.HTTP_204_NO_CONTENT)

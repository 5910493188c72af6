"""Puzzle change stream endpoint."""

from typing import AsyncGenerator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from puzzlehost.web.access import (
    PUZZLE_READ,
    load_owned_puzzle,
    parse_id_or_404,
    require_user,
)
from puzzlehost.web.deps import DataAccessDep, EventBusDep, UserDep
from puzzlehost.web.events import PuzzleEventBus, event_stream

router = APIRouter(prefix="/api/puzzleEvents", tags=["events"])


async def _subscriber_stream(
    bus: PuzzleEventBus, puzzle_id: int, queue
) -> AsyncGenerator[str, None]:
    """Relay frames and drop the subscription when the client goes away."""
    try:
        async for frame in event_stream(queue):
            yield frame
    finally:
        await bus.unsubscribe(puzzle_id, queue)


@router.get("/{puzzle_id}")
async def stream_puzzle_events(
    puzzle_id: str,
    data_access: DataAccessDep,
    events: EventBusDep,
    user: UserDep,
) -> StreamingResponse:
    """Stream changes to a puzzle using Server-Sent Events.

    Events:
    - puzzle_event: a PuzzleEvent as JSON (renames, answer changes)
    - keepalive: sent every 30s to keep the connection alive
    - close: the puzzle was deleted
    """
    pid = parse_id_or_404(puzzle_id, "Puzzle")
    owner = require_user(user, PUZZLE_READ)
    load_owned_puzzle(data_access, pid, owner, PUZZLE_READ)

    queue = await events.subscribe(pid)

    return StreamingResponse(
        _subscriber_stream(events, pid, queue),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )

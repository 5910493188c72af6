"""Puzzle change events for streaming clients.

Each subscriber to a puzzle gets its own asyncio.Queue. Routes publish an
event after a change is committed; a None on a queue means the stream is
over (the puzzle was deleted).
"""

from __future__ import annotations

import asyncio
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, AsyncGenerator

import structlog

logger = structlog.get_logger(__name__)

KEEPALIVE_SECONDS = 30.0


class PuzzleEventType(str, Enum):
    """Kinds of puzzle changes."""

    PUZZLE_RENAMED = "PUZZLE_RENAMED"
    PUZZLE_DELETED = "PUZZLE_DELETED"
    ANSWER_CREATED = "ANSWER_CREATED"
    ANSWER_UPDATED = "ANSWER_UPDATED"
    ANSWER_DELETED = "ANSWER_DELETED"


@dataclass
class PuzzleEvent:
    """A change to one puzzle."""

    event_type: PuzzleEventType
    puzzle_id: int
    data: dict[str, Any] = field(default_factory=dict)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the event stream."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type.value,
            "puzzle": str(self.puzzle_id),
            "created_at": self.created_at,
            "data": self.data,
        }


class PuzzleEventBus:
    """Fans puzzle events out to per-subscriber queues."""

    def __init__(self):
        self._subscribers: dict[int, list[asyncio.Queue[PuzzleEvent | None]]] = {}
        self._lock = asyncio.Lock()

    async def subscribe(self, puzzle_id: int) -> asyncio.Queue[PuzzleEvent | None]:
        """Register a new subscriber queue for a puzzle."""
        queue: asyncio.Queue[PuzzleEvent | None] = asyncio.Queue()
        async with self._lock:
            self._subscribers.setdefault(puzzle_id, []).append(queue)

        logger.debug("events.subscribed", puzzle_id=puzzle_id)
        return queue

    async def unsubscribe(
        self, puzzle_id: int, queue: asyncio.Queue[PuzzleEvent | None]
    ) -> None:
        """Remove a subscriber queue. Unknown queues are ignored."""
        async with self._lock:
            queues = self._subscribers.get(puzzle_id, [])
            if queue in queues:
                queues.remove(queue)
            if not queues:
                self._subscribers.pop(puzzle_id, None)

    async def publish(self, event: PuzzleEvent) -> int:
        """Deliver an event to every subscriber of its puzzle.

        Returns:
            Number of subscribers the event was delivered to
        """
        async with self._lock:
            queues = list(self._subscribers.get(event.puzzle_id, []))

        for queue in queues:
            queue.put_nowait(event)

        logger.debug(
            "events.published",
            puzzle_id=event.puzzle_id,
            event_type=event.event_type.value,
            subscribers=len(queues),
        )
        return len(queues)

    async def close(self, puzzle_id: int) -> None:
        """End every stream for a puzzle."""
        async with self._lock:
            queues = self._subscribers.pop(puzzle_id, [])

        for queue in queues:
            queue.put_nowait(None)

    async def close_all(self) -> None:
        """End every open stream (server shutdown)."""
        async with self._lock:
            subscribers = self._subscribers
            self._subscribers = {}

        for queues in subscribers.values():
            for queue in queues:
                queue.put_nowait(None)

    def subscriber_count(self, puzzle_id: int) -> int:
        """Number of open streams for a puzzle."""
        return len(self._subscribers.get(puzzle_id, []))


async def event_stream(
    queue: asyncio.Queue[PuzzleEvent | None],
    keepalive_seconds: float = KEEPALIVE_SECONDS,
) -> AsyncGenerator[str, None]:
    """Format queued events as Server-Sent Events frames."""
    while True:
        try:
            event = await asyncio.wait_for(queue.get(), timeout=keepalive_seconds)
        except asyncio.TimeoutError:
            yield "event: keepalive\ndata: ping\n\n"
            continue

        if event is None:
            yield "event: close\ndata: Puzzle deleted\n\n"
            return

        yield f"event: puzzle_event\ndata: {json.dumps(event.to_dict())}\n\n"

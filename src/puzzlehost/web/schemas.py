"""Pydantic schemas for the Web API.

Request bodies arrive as JSON or form data, so request models accept the
camelCase field names clients send (answerIndex) and coerce numbers to
strings where a value is textual.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from puzzlehost import __version__
from puzzlehost.db.answers_repository import AnswerRecord
from puzzlehost.db.puzzles_repository import PuzzleRecord


# =============================================================================
# PUZZLE SCHEMAS
# =============================================================================


class PuzzleCreate(BaseModel):
    """Request body for creating a puzzle."""

    name: str = Field(..., min_length=1, max_length=200)

    model_config = {"coerce_numbers_to_str": True}


class PuzzleUpdate(BaseModel):
    """Request body for renaming a puzzle."""

    name: str = Field(..., min_length=1, max_length=200)

    model_config = {"coerce_numbers_to_str": True}


class PuzzleResponse(BaseModel):
    """Response for a puzzle. The owner is never exposed."""

    id: str
    name: str

    @classmethod
    def from_record(cls, record: PuzzleRecord) -> PuzzleResponse:
        return cls(id=str(record.id), name=record.name)


# =============================================================================
# ANSWER SCHEMAS
# =============================================================================


def _reject_bool(value: Any) -> Any:
    # JSON true/false would otherwise validate as 1/0
    if isinstance(value, bool):
        raise ValueError("answerIndex must be an integer")
    return value


AnswerIndex = Annotated[int, BeforeValidator(_reject_bool), Field(ge=0)]


class AnswerCreate(BaseModel):
    """Request body for creating a puzzle answer."""

    puzzle: str
    value: str = Field(..., max_length=1000)
    answer_index: AnswerIndex | None = Field(default=None, alias="answerIndex")

    model_config = {"populate_by_name": True, "coerce_numbers_to_str": True}


class AnswerUpdate(BaseModel):
    """Request body for changing an answer's value and/or position."""

    value: str | None = Field(default=None, max_length=1000)
    answer_index: AnswerIndex | None = Field(default=None, alias="answerIndex")

    model_config = {"populate_by_name": True, "coerce_numbers_to_str": True}


class AnswerResponse(BaseModel):
    """Response for a puzzle answer."""

    id: str
    puzzle: str
    value: str
    answer_index: int = Field(alias="answerIndex")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_record(cls, record: AnswerRecord) -> AnswerResponse:
        return cls(
            id=str(record.id),
            puzzle=str(record.puzzle_id),
            value=record.value,
            answer_index=record.answer_index,
        )


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    database: dict[str, Any] = Field(default_factory=dict)

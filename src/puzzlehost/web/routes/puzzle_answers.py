"""Puzzle answer endpoints.

Answers are ordered within their puzzle; creating, moving or deleting one
renumbers its neighbours (see puzzlehost.db.answers_repository).
"""

from http import HTTPStatus

import structlog
from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse

from puzzlehost.web.access import (
    ANSWER_ACCESS,
    load_owned_answer,
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
from puzzlehost.web.schemas import AnswerCreate, AnswerResponse, AnswerUpdate

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/puzzleAnswer", tags=["answers"])


@router.post("", status_code=status.HTTP_201_CREATED, response_class=PlainTextResponse)
async def create_answer(
    request: Request,
    data_access: DataAccessDep,
    events: EventBusDep,
    user: UserDep,
) -> PlainTextResponse:
    """Insert an answer into a puzzle at answerIndex (default: the end).

    The response body is the new answer id as plain text.
    """
    body = parse_body(AnswerCreate, await read_payload(request))
    pid = parse_id_or_404(body.puzzle, "Puzzle")
    owner = require_user(user, ANSWER_ACCESS)
    load_owned_puzzle(data_access, pid, owner, ANSWER_ACCESS)

    answer = data_access.answers.create(pid, body.value, body.answer_index)
    await events.publish(
        PuzzleEvent(
            PuzzleEventType.ANSWER_CREATED,
            pid,
            AnswerResponse.from_record(answer).model_dump(by_alias=True),
        )
    )

    return PlainTextResponse(str(answer.id), status_code=status.HTTP_201_CREATED)


@router.get("", response_model=list[AnswerResponse])
@router.get("/", response_model=list[AnswerResponse], include_in_schema=False)
async def list_answers(
    data_access: DataAccessDep,
    user: UserDep,
    puzzle: str | None = None,
) -> list[AnswerResponse]:
    """List a puzzle's answers ordered by answerIndex (?puzzle=<id>)."""
    if puzzle is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No puzzle given; use ?puzzle=<id>",
        )

    pid = parse_id_or_404(puzzle, "Puzzle")
    owner = require_user(user, ANSWER_ACCESS)
    load_owned_puzzle(data_access, pid, owner, ANSWER_ACCESS)

    return [AnswerResponse.from_record(a) for a in data_access.answers.list_for_puzzle(pid)]


@router.get("/{answer_id}", response_model=AnswerResponse)
async def get_answer(
    answer_id: str,
    data_access: DataAccessDep,
    user: UserDep,
    puzzle: str | None = None,
) -> AnswerResponse:
    """Get a single answer."""
    if puzzle is not None:
        raise HTTPException(
            status_code=HTTPStatus.REQUEST_URI_TOO_LONG,
            detail="Give either an answer id or ?puzzle=<id>, not both",
        )

    aid = parse_id_or_404(answer_id, "Answer")
    owner = require_user(user, ANSWER_ACCESS)
    answer = load_owned_answer(data_access, aid, owner, ANSWER_ACCESS)

    return AnswerResponse.from_record(answer)


@router.put("/{answer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_answer(
    answer_id: str,
    request: Request,
    data_access: DataAccessDep,
    events: EventBusDep,
    user: UserDep,
) -> Response:
    """Change an answer's value and/or move it to a new answerIndex."""
    body = parse_body(AnswerUpdate, await read_payload(request))
    if body.value is None and body.answer_index is None:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail="Nothing to update; give value and/or answerIndex",
        )

    aid = parse_id_or_404(answer_id, "Answer")
    owner = require_user(user, ANSWER_ACCESS)
    answer = load_owned_answer(data_access, aid, owner, ANSWER_ACCESS)

    data_access.answers.update(aid, value=body.value, answer_index=body.answer_index)
    updated = data_access.answers.get(aid)
    if updated is not None:
        await events.publish(
            PuzzleEvent(
                PuzzleEventType.ANSWER_UPDATED,
                answer.puzzle_id,
                AnswerResponse.from_record(updated).model_dump(by_alias=True),
            )
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{answer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_answer(
    answer_id: str,
    data_access: DataAccessDep,
    events: EventBusDep,
    user: UserDep,
) -> Response:
    """Delete an answer; later answers move down one place."""
    aid = parse_id_or_404(answer_id, "Answer")
    owner = require_user(user, ANSWER_ACCESS)
    answer = load_owned_answer(data_access, aid, owner, ANSWER_ACCESS)

    data_access.answers.delete(aid)
    await events.publish(
        PuzzleEvent(
            PuzzleEventType.ANSWER_DELETED,
            answer.puzzle_id,
            {"id": str(aid), "answerIndex": answer.answer_index},
        )
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)

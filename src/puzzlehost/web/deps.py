"""Request dependencies for route handlers.

Routes read the injected DataAccess and event bus from app.state, and read
request bodies that may be JSON or form-encoded.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Annotated, Any, TypeVar

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError

from puzzlehost.db.data_access import DataAccess
from puzzlehost.web.auth import get_authenticated_user
from puzzlehost.web.events import PuzzleEventBus

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_data_access(request: Request) -> DataAccess:
    """Get the DataAccess installed by setup_server."""
    return request.app.state.data_access


def get_event_bus(request: Request) -> PuzzleEventBus:
    """Get the event bus installed by setup_server."""
    return request.app.state.event_bus


DataAccessDep = Annotated[DataAccess, Depends(get_data_access)]
EventBusDep = Annotated[PuzzleEventBus, Depends(get_event_bus)]
UserDep = Annotated[str | None, Depends(get_authenticated_user)]


async def read_payload(request: Request) -> dict[str, Any]:
    """Read a JSON or form-encoded body into a dict.

    Raises:
        HTTPException: 422 if the body is not a JSON object
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items()}

    body = await request.body()
    if not body.strip():
        return {}

    try:
        data = json.loads(body)
    except ValueError:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail="Request body must be JSON or form data",
        )

    if not isinstance(data, dict):
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail="Request body must be an object",
        )

    return data


def parse_body(model: type[ModelT], payload: dict[str, Any]) -> ModelT:
    """Validate a payload against a request model.

    Raises:
        HTTPException: 422 listing the invalid fields
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail=problems,
        )

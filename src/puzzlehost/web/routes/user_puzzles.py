"""User puzzle listing endpoint."""

from fastapi import APIRouter

from puzzlehost.web.access import USER_PUZZLES, require_user
from puzzlehost.web.deps import DataAccessDep, UserDep
from puzzlehost.web.schemas import PuzzleResponse

router = APIRouter(prefix="/api/userPuzzles", tags=["puzzles"])


@router.get("", response_model=list[PuzzleResponse])
async def list_user_puzzles(
    data_access: DataAccessDep,
    user: UserDep,
) -> list[PuzzleResponse]:
    """List the current user's puzzles in creation order."""
    owner = require_user(user, USER_PUZZLES)
    return [
        PuzzleResponse.from_record(p) for p in data_access.puzzles.list_for_owner(owner)
    ]

"""Health check endpoint."""

from fastapi import APIRouter

from puzzlehost.web.deps import DataAccessDep
from puzzlehost.web.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(data_access: DataAccessDep) -> HealthResponse:
    """Check API and database health."""
    database = data_access.database.check_health()
    return HealthResponse(
        status="ok" if database["status"] == "healthy" else "degraded",
        database=database,
    )

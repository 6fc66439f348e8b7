"""
Health check router.

Reports application version and whether the account store answers.
An unreachable store degrades the status without failing the request,
so orchestrators can tell a live process from a ready one.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from app.core.config import settings
from app.infrastructure.portfolio.database import ping
from app.interfaces.portfolio.dependencies import get_db_engine
from app.interfaces.portfolio.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application status, version and account-store reachability.",
)
def health_check(engine: Engine = Depends(get_db_engine)) -> HealthResponse:
    if ping(engine):
        return HealthResponse(status="ok", version=settings.version, database="ok")
    return HealthResponse(status="degraded", version=settings.version, database="unavailable")

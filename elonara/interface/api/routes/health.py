"""Liveness check."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from elonara.config import Settings

API_VERSION = "0.1.0"

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    status: str
    environment: str
    version: str
    git_sha: str
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings]) -> HealthResponse:
    """Report that the process is up and which build is serving."""
    return HealthResponse(
        status="healthy",
        environment=settings.environment,
        version=API_VERSION,
        git_sha=settings.git_sha,
        timestamp=datetime.now(timezone.utc),
    )

"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    message: str
    timestamp: str
    environment: str
    database: Literal["up", "down"]


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Liveness probe; also reports whether the database answers."""
    settings = request.app.state.settings
    database_up = await request.app.state.db.ping()
    return HealthResponse(
        message="PeoplePulse AI Backend Running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.app_env,
        database="up" if database_up else "down",
    )

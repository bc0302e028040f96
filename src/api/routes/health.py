"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.dependencies import get_connection_registry
from core.config import settings
from infrastructure.database.session import get_async_session
from infrastructure.realtime.registry import ConnectionRegistry

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    realtime_connections: int | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies.
    """
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=_now(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
    registry: ConnectionRegistry | None = Depends(get_connection_registry),
) -> HealthResponse:
    """
    Database connectivity plus the number of live realtime connections
    held by this process.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {type(e).__name__}"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        version=VERSION,
        timestamp=_now(),
        environment=settings.app_env,
        database=db_status,
        realtime_connections=registry.connection_count if registry is not None else None,
    )

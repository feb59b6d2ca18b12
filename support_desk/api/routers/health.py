"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/realtime

Dependencies: support_desk.boundary.db, support_desk.core.realtime
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.api.deps import get_event_hub
from support_desk.boundary.db import get_async_db
from support_desk.core.realtime import EventHub

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


class RealtimeHealthResponse(HealthResponse):
    session_connections: int
    staff_connections: int
    total_sessions: int


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)):
    """Database health check (runs `SELECT 1`)."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.exception("Database health check failed", extra={"error": str(e)})
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "message": "Database unavailable"},
        )
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/realtime", response_model=RealtimeHealthResponse)
async def health_check_realtime(
    event_hub: EventHub = Depends(get_event_hub),
) -> RealtimeHealthResponse:
    """Open SSE connection counts."""
    stats = event_hub.get_connection_stats()
    return RealtimeHealthResponse(
        status="healthy",
        message="Event hub running",
        session_connections=stats["sessionConnections"],
        staff_connections=stats["staffConnections"],
        total_sessions=stats["totalSessions"],
    )

"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware and error
envelopes, and runs background tasks (SSE heartbeat, inactive session
sweep) for the lifetime of the process.

Dependencies: fastapi, uvicorn, support_desk.api, support_desk.observability, support_desk.configs
System role: Application initialization and configuration
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from support_desk import __version__
from support_desk.api.deps import get_service_cache
from support_desk.api.routers import (
    chat_router,
    health_router,
    staff_router,
    uploads_router,
)
from support_desk.api.routers.router_utils import session_payload
from support_desk.application.services import QueueService, StaffService
from support_desk.boundary.db.connection import dispose_engine, get_async_session_factory
from support_desk.boundary.db.create_tables import create_all_tables
from support_desk.configs import get_settings
from support_desk.core.realtime import EventHub, heartbeat_loop
from support_desk.models.common import ErrorResponse
from support_desk.observability.log_utils import log_exception_with_context
from support_desk.observability.logger import configure_logging
from support_desk.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


async def close_inactive_and_notify(
    db: AsyncSession,
    event_hub: EventHub,
    inactive_days: int,
    avg_handle_minutes: int,
) -> int:
    """
    Close idle sessions once and push each closure to open consoles.

    Returns:
        int: Number of sessions closed
    """
    staff_service = StaffService(db, QueueService(db, avg_handle_minutes))
    closed = await staff_service.close_inactive_sessions(inactive_days)
    for chat_session in closed:
        await event_hub.broadcast_session_update(session_payload(chat_session))
    return len(closed)


async def inactive_session_sweep(
    event_hub: EventHub,
    interval: float,
    inactive_days: int,
    avg_handle_minutes: int,
) -> None:
    """
    Periodically close sessions idle for `inactive_days`, until cancelled.

    Args:
        event_hub: Hub that receives `session_update` for closed sessions
        interval: Seconds between sweeps
        inactive_days: Idle threshold in days
        avg_handle_minutes: Used when recalculating queue positions
    """
    SessionFactory = get_async_session_factory()
    while True:
        await asyncio.sleep(interval)
        try:
            async with SessionFactory() as db:
                await close_inactive_and_notify(db, event_hub, inactive_days, avg_handle_minutes)
        except Exception as e:
            log_exception_with_context(logger, "Inactive session sweep failed", e, inactive_days=inactive_days)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup: logging, schema creation, background tasks.
    Shutdown: cancel tasks, drop cached singletons, dispose the engine.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    await create_all_tables()

    cache = get_service_cache()
    tasks = [
        asyncio.create_task(
            heartbeat_loop(cache.event_hub, settings.realtime.heartbeat_interval_seconds),
            name="sse-heartbeat",
        )
    ]
    if settings.sessions.inactive_days > 0:
        tasks.append(
            asyncio.create_task(
                inactive_session_sweep(
                    cache.event_hub,
                    settings.sessions.sweep_interval_seconds,
                    settings.sessions.inactive_days,
                    settings.queue.avg_handle_minutes,
                ),
                name="inactive-session-sweep",
            )
        )
    logger.info(
        "Application startup complete",
        extra={"environment": settings.environment, "background_tasks": [t.get_name() for t in tasks]},
    )

    yield

    for task in tasks:
        task.cancel()
    for task in tasks:
        with suppress(asyncio.CancelledError):
            await task
    cache.clear()
    await dispose_engine()
    logger.info("Application shutdown")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "form")]
    if first.get("type") == "missing":
        return f"Missing required field: {'.'.join(location)}" if location else "Missing required fields"
    message = first.get("msg", "Invalid value")
    return f"{'.'.join(location)}: {message}" if location else message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors in the `{success, error}` envelope."""
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=detail).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request validation failures are client errors (400)."""
    message = _validation_message(exc)
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "error": message},
    )
    return JSONResponse(status_code=400, content=ErrorResponse(error=message).model_dump())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Support Desk API",
        description="Customer support chat with live staff console",
        version=__version__,
        lifespan=lifespan,
    )

    # Added first = innermost; correlation wraps request logging.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)
    app.include_router(chat_router)
    app.include_router(staff_router)
    app.include_router(uploads_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "support_desk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()

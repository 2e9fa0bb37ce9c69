"""TaskMind - personal task and habit tracker with recurring tasks and streaks."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from taskmind.core.config import constants, settings
from taskmind.core.db_client import close_connection, init_db
from taskmind.core.dates import to_iso, utc_now
from taskmind.core.errors import (
    AlreadyCompletedError,
    NotFoundError,
    ValidationFailureError,
    classify_error_with_response,
)
from taskmind.core.logging import configure_logfire, instrument_fastapi
from taskmind.interface.streak_router import router as streak_router
from taskmind.interface.summary_router import router as summary_router
from taskmind.interface.task_router import router as task_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so startup logs are captured
    configure_logfire()

    await init_db()
    logger.info("Database initialized", extra={"db_path": settings.sqlite_db_path})

    yield

    await close_connection()


app = FastAPI(
    title="taskmind",
    description="Personal task and habit tracker with recurring tasks and streaks",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(task_router)
app.include_router(streak_router)
app.include_router(summary_router)


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a domain error as a structured JSON response."""
    status_code, error = classify_error_with_response(exc)
    logger.info(
        "request_failed",
        extra={"path": request.url.path, "code": error.code, "status_code": status_code},
    )
    return JSONResponse(content={"error": error.message, **error.model_dump(mode="json")}, status_code=status_code)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render any other failure as a generic server error."""
    status_code, error = classify_error_with_response(exc)
    logger.error("request_unexpected_error", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(content={"error": error.message, **error.model_dump(mode="json")}, status_code=status_code)


app.add_exception_handler(NotFoundError, domain_error_handler)
app.add_exception_handler(AlreadyCompletedError, domain_error_handler)
app.add_exception_handler(ValidationFailureError, domain_error_handler)
app.add_exception_handler(Exception, unexpected_error_handler)


@app.get("/api/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={
            "status": "healthy",
            "timestamp": to_iso(utc_now()),
            "environment": settings.environment,
        },
        status_code=constants.HTTP_OK,
    )

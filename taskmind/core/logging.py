"""Logging and observability configuration using Pydantic Logfire.

All modules use Python's standard logging library (logging.getLogger(__name__));
Logfire captures and enriches these records once configured.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_user_context(logger, "info", "Task reset", user_id="123", task_id="42")
"""

import logging

import logfire
from fastapi import FastAPI

from taskmind.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment.

    Production refuses to start without LOGFIRE_TOKEN. Elsewhere records are only
    shipped when a token is present and Logfire otherwise stays local.

    Raises:
        ValueError: If running in production without a Logfire token
    """
    if settings.is_production:
        token = settings.require_credential("logfire_token", "Logfire")
    else:
        token = settings.logfire_token

    logfire.configure(
        token=token,
        service_name=settings.service_name,
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def instrument_fastapi(app: FastAPI) -> None:
    """Add Logfire instrumentation to FastAPI application."""
    logfire.instrument_fastapi(app)
    logger = logging.getLogger(__name__)
    logger.info("FastAPI instrumentation configured")


def span(name: str) -> logfire.LogfireSpan:
    """Create a custom span for service layer functions.

    Usage:
        with span("task_service.get_tasks"):
            ...
    """
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (task_id, date, operation_type, etc.)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)


def log_with_user_context(
    logger: logging.Logger,
    level: str,
    message: str,
    user_id: str | None = None,
    **extra: object,
) -> None:
    """Log a message with the owning user's id attached.

    Usage:
        log_with_user_context(logger, "warning", "Cascade failed", user_id="123", task_id="42")
    """
    context = {"user_id": user_id, **extra} if user_id else extra
    log_with_context(logger, level, message, **context)

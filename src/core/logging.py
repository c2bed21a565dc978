"""Observability setup: Logfire spans on top of stdlib logging.

Modules log through ``logging.getLogger(__name__)``; Logfire picks those records
up once ``configure_logfire`` has run. Service operations open a span named
``<component>.<operation>`` so a cascade shows up as one trace:

    with span("task_engine.update_task"):
        ...

Structured fields go in ``extra``, or through the helpers below:

    log_with_context(logger, "warning", "Key already held", key_id="2", holder_id="staff-1")
"""

import logging

import logfire
from fastapi import FastAPI

from src.core.config import settings


logger = logging.getLogger(__name__)

SERVICE_NAME = "keyward"


def configure_logfire() -> None:
    """Configure Logfire for this process.

    Without ``LOGFIRE_TOKEN`` nothing leaves the machine; spans and console
    output still work.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name=SERVICE_NAME,
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logger.info("Logfire configured", extra={"environment": settings.environment})


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by ``app``."""
    logfire.instrument_fastapi(app)
    logger.info("FastAPI instrumentation configured")


def span(name: str) -> logfire.LogfireSpan:
    """Open a span around one service operation."""
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log ``message`` at ``level`` with ``context`` attached as structured fields.

    Args:
        logger: Logger of the calling module
        level: "debug", "info", "warning", "error" or "critical"
        message: Log message
        **context: Record IDs and other fields (key_id, task_id, staff_id, ...)
    """
    getattr(logger, level.lower())(message, extra=context)


def log_with_staff_context(
    logger: logging.Logger,
    level: str,
    message: str,
    staff_id: str | None = None,
    **extra: object,
) -> None:
    """Log a message about an account's activity, tagged with its ID when known."""
    if staff_id:
        extra = {"staff_id": staff_id, **extra}
    log_with_context(logger, level, message, **extra)

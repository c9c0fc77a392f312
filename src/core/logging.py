"""Observability setup for gamifai-rewards, backed by Pydantic Logfire.

Modules log through the standard library (``logging.getLogger(__name__)``) with
snake_case event names and structured ``extra`` fields; once
``configure_logfire`` has run, those records are forwarded to Logfire.

    logger.info("activity_classified", extra={"match_count": 3})
    log_with_context(logger, "info", "reward_calculation_summary", total_xp=120)
"""

import logging

import logfire
from fastapi import FastAPI

from src.core.config import settings


SERVICE_NAME = "gamifai-rewards"
SERVICE_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def configure_logfire() -> None:
    """Configure Logfire and route standard library logging through it.

    Without a LOGFIRE_TOKEN nothing is exported, but spans and logs are still
    created so local runs behave the same as deployed ones.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logging.basicConfig(level=logging.INFO, handlers=[logfire.LogfireLoggingHandler()])
    logger.info("logfire_configured", extra={"environment": settings.environment})


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every HTTP request handled by the app."""
    logfire.instrument_fastapi(app)
    logger.info("fastapi_instrumented")


def instrument_pydantic_ai() -> None:
    """Trace activity classifier runs (agent calls, model requests, output validation)."""
    logfire.instrument_pydantic_ai()
    logger.info("pydantic_ai_instrumented")


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Open a Logfire span around a unit of service work.

    Usage:
        with span("activity_analysis.analyze", activity_length=120):
            ...
    """
    return logfire.span(name, **attributes)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log an event with its fields attached as structured ``extra``.

    Args:
        logger: Logger to emit on
        level: Level name ("debug", "info", "warning", "error", "critical")
        message: Event name
        **context: Structured fields (processed_count, total_xp, ...)
    """
    getattr(logger, level.lower())(message, extra=context)

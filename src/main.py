"""gamifai-rewards - turns a user's daily activity into XP and shard rewards."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.logging import SERVICE_VERSION, configure_logfire, instrument_fastapi, instrument_pydantic_ai
from src.interface.activity_router import router as activity_router


logger = logging.getLogger(__name__)


def validate_startup_configuration() -> None:
    """Validate required credentials, exiting with a clear message if any are missing."""
    logger.info("startup_validation_begin")

    try:
        settings.require_credential("openrouter_api_key", "OpenRouter API key")
    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    logger.info("startup_validation_complete", extra={"status": "ok", "model_id": settings.model_id})


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so validation logs are captured
    configure_logfire()
    validate_startup_configuration()
    instrument_pydantic_ai()
    yield


app = FastAPI(
    title="gamifai-rewards",
    description="Daily activity analysis and XP/shard reward calculation",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(activity_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)

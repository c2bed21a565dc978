"""keyward - key custody tracker for supervisors and staff."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.errors import KeyCustodyError, classify_error_with_response
from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.api_router import router as api_router
from src.services.custody_store import KeyCustodyStore


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    configure_logfire()
    logger.info("startup_complete", extra={"seed_demo_data": settings.seed_demo_data})
    yield
    # Shutdown
    logger.info("shutdown_complete")


async def handle_custody_error(_request: Request, exc: Exception) -> JSONResponse:
    """Translate engine errors into structured JSON responses."""
    error = classify_error_with_response(exc)
    logger.info("request_rejected", extra={"code": error.code, "error": str(exc)})
    return JSONResponse(content=error.model_dump(mode="json"), status_code=error.status_code)


def create_app(store: KeyCustodyStore | None = None) -> FastAPI:
    """Build the application around one custody store.

    Args:
        store: Store to serve; a new one is created from settings when omitted
    """
    application = FastAPI(
        title="keyward",
        description="Key custody tracker",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.state.store = store or KeyCustodyStore()

    # Instrument FastAPI with Logfire
    instrument_fastapi(application)

    application.add_exception_handler(KeyCustodyError, handle_custody_error)
    application.include_router(api_router)

    @application.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "healthy"}, status_code=200)

    return application


app = create_app()

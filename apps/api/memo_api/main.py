"""FastAPI main application."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import NoResultFound

from memo_api.api.v1.router import api_router
from memo_api.core.config import settings
from memo_api.core.database import Database
from memo_api.core.errors import MemoServiceError
from memo_api.core.observability import configure_logging, request_middleware
from memo_api.services.audio import DurationProber
from memo_api.services.storage import StorageService
from memo_api.services.transcription import TranscriptionService

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Recording not found"},
    )


async def upstream_error_handler(request: Request, exc: MemoServiceError) -> JSONResponse:
    logger.error("Upstream service failed", extra={"error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc)},
    )


def create_app(
    database: Database | None = None,
    storage: StorageService | None = None,
    transcriber: TranscriptionService | None = None,
    prober: DurationProber | None = None,
) -> FastAPI:
    """Build the application; collaborators default to the configured services."""
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        # Startup
        app.state.db = database or Database(str(settings.DATABASE_URL))
        await app.state.db.connect()

        if storage is None:
            app.state.storage = StorageService()
            app.state.storage.ensure_bucket()
        else:
            app.state.storage = storage
        app.state.transcriber = transcriber or TranscriptionService()
        app.state.prober = prober or DurationProber()

        yield

        # Shutdown
        await app.state.db.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Voice memo ingestion, transcription and playback",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_middleware)

    app.add_exception_handler(NoResultFound, not_found_handler)
    app.add_exception_handler(MemoServiceError, upstream_error_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": settings.PROJECT_NAME}

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("memo_api.main:app", host="0.0.0.0", port=8000, log_level=settings.LOG_LEVEL.lower())

"""
FastAPI application for Lemon Learn.

Provides REST API for:
- Creating, reviewing, resetting and deleting lessons
- Today's due list, search and counts
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from config import Settings, get_settings
from src.db.database import check_database_health
from src.lessons import InvalidLessonError, LessonNotFoundError, LessonService, PersistenceError

API_VERSION = "0.1.0"


def create_app(settings: Settings | None = None, service: LessonService | None = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Settings (cached settings if None)
        service: Lesson service to serve (built from settings at startup if None)
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown events."""
        # Startup
        logger.info("Starting Lemon Learn API...")
        if getattr(app.state, "lesson_service", None) is None:
            app.state.lesson_service = LessonService.from_settings(settings)
        logger.info(f"Serving {len(app.state.lesson_service.scheduler)} lessons")

        yield

        # Shutdown
        logger.info("Shutting down Lemon Learn API...")

    app = FastAPI(
        title="Lemon Learn",
        description="Spaced-repetition lesson tracker. Lessons are due 1 day after "
        "creation, then 3, 7, 14 and 30 days after each review.",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.lesson_service = service

    # CORS middleware for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    @app.get("/", tags=["Health"])
    def root() -> dict[str, str]:
        """Root endpoint returning service info."""
        return {
            "service": "lemon-learn",
            "version": API_VERSION,
            "status": "ok",
        }

    @app.get("/health", tags=["Health"])
    def health_check(request: Request) -> dict[str, Any]:
        """Health check with a database connectivity test."""
        lesson_service: LessonService | None = request.app.state.lesson_service
        engine = lesson_service.store.engine if lesson_service is not None else None
        db_status, db_error = check_database_health(engine)

        result: dict[str, Any] = {
            "status": "healthy" if db_status == "ok" else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "components": {"database": db_status},
            "config": settings.get_scheduler_config(),
        }
        if db_error:
            result["errors"] = {"database": db_error}
        return result

    from src.api.routers import lessons_router

    app.include_router(lessons_router.router, prefix="/lessons", tags=["Lessons"])
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LessonNotFoundError)
    async def _not_found(request: Request, exc: LessonNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(InvalidLessonError)
    async def _invalid(request: Request, exc: InvalidLessonError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(PersistenceError)
    async def _persistence(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error(f"Persistence failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Lesson store unavailable"},
        )

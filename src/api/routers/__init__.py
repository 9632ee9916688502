"""API routers for Lemon Learn."""

from src.api.routers import lessons_router

__all__ = [
    "lessons_router",
]

# SQLAlchemy models
from .base import Base
from .lesson import LessonRecord

__all__ = [
    "Base",
    "LessonRecord",
]

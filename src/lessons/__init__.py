"""
Lemon Learn: spaced-repetition lesson tracking.

Components:
- LessonScheduler: Lesson lifecycle, review intervals and derived views
- LessonStore: SQLAlchemy persistence
- LessonService: Scheduler + store, one lock around every call
- DueReminder: Periodic "lessons due today" notification
"""

from .errors import (
    DuplicateLessonError,
    InvalidLessonError,
    LessonError,
    LessonNotFoundError,
    PersistenceError,
)
from .models import Lesson, LessonStats, LessonStatus
from .scheduler import REVIEW_INTERVALS, LessonScheduler, next_interval_days, system_clock
from .state_store import LessonStore
from .service import LessonService
from .reminder import DueReminder, ReminderConfig

__all__ = [
    # Models
    "Lesson",
    "LessonStats",
    "LessonStatus",
    # Scheduling
    "REVIEW_INTERVALS",
    "LessonScheduler",
    "next_interval_days",
    "system_clock",
    # Persistence
    "LessonStore",
    "LessonService",
    # Reminders
    "DueReminder",
    "ReminderConfig",
    # Errors
    "LessonError",
    "LessonNotFoundError",
    "InvalidLessonError",
    "DuplicateLessonError",
    "PersistenceError",
]

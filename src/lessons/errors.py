"""
Exceptions raised by the lesson scheduler and its collaborators.
"""

from __future__ import annotations


class LessonError(Exception):
    """Base class for lesson errors."""


class LessonNotFoundError(LessonError):
    """No lesson with the requested id exists in the collection."""

    def __init__(self, lesson_id: str):
        super().__init__(f"Lesson not found: {lesson_id}")
        self.lesson_id = lesson_id


class InvalidLessonError(LessonError):
    """Lesson input was rejected by validation."""


class DuplicateLessonError(LessonError):
    """The same lesson id appeared twice while loading a collection."""

    def __init__(self, lesson_id: str):
        super().__init__(f"Duplicate lesson id: {lesson_id}")
        self.lesson_id = lesson_id


class PersistenceError(LessonError):
    """The lesson store could not read or write records."""

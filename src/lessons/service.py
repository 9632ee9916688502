"""
Lesson service: the scheduler wired to its store.

Each mutation is applied to the in-memory scheduler first and then persisted.
A failed write is logged and re-raised; the in-memory state is kept.

Lessons handed out are copies taken under the lock, so callers can read
them while another thread mutates the collection.
"""

from __future__ import annotations

import dataclasses
import threading

from loguru import logger

from config import Settings, get_settings

from .errors import PersistenceError
from .models import Lesson, LessonStats
from .scheduler import Clock, LessonScheduler
from .state_store import LessonStore


def _snapshot(lesson: Lesson | None) -> Lesson | None:
    return dataclasses.replace(lesson) if lesson is not None else None


class LessonService:
    """
    Single entry point for presentation and notification callers.

    A lock serializes every call so the reminder thread and request
    handlers never observe a half-applied mutation.
    """

    def __init__(self, scheduler: LessonScheduler, store: LessonStore):
        self.scheduler = scheduler
        self.store = store
        self._lock = threading.RLock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        clock: Clock | None = None,
        store: LessonStore | None = None,
    ) -> LessonService:
        """
        Build a service from configuration and load stored lessons.

        Args:
            settings: Settings (cached settings if None)
            clock: Time source for the scheduler (system clock if None)
            store: Existing store (opens Settings.database_url if None)
        """
        settings = settings or get_settings()
        scheduler = LessonScheduler(
            clock=clock,
            tz=settings.get_timezone(),
            require_title=settings.require_title,
        )
        service = cls(scheduler, store or LessonStore(settings.database_url))
        service.reload()
        return service

    def reload(self) -> int:
        """Replace the in-memory collection with the store's contents."""
        with self._lock:
            return self.scheduler.load(self.store.load_all())

    # =========================================================================
    # Mutations
    # =========================================================================

    def create(self, title: str, note: str = "", tag: str = "", link: str = "") -> Lesson:
        with self._lock:
            lesson = self.scheduler.create(title, note=note, tag=tag, link=link)
            self._persist(lesson)
            logger.info(f"Added lesson {lesson.id}: {lesson.title!r}")
            return _snapshot(lesson)

    def mark_reviewed(self, lesson_id: str) -> Lesson | None:
        with self._lock:
            lesson = self.scheduler.mark_reviewed(lesson_id)
            if lesson is not None:
                self._persist(lesson)
            return _snapshot(lesson)

    def reset_review(self, lesson_id: str) -> Lesson | None:
        with self._lock:
            lesson = self.scheduler.reset_review(lesson_id)
            if lesson is not None:
                self._persist(lesson)
            return _snapshot(lesson)

    def delete(self, lesson_id: str) -> Lesson | None:
        with self._lock:
            lesson = self.scheduler.delete(lesson_id)
            if lesson is not None:
                try:
                    self.store.delete(lesson_id)
                except PersistenceError as e:
                    logger.error(f"Lesson {lesson_id} deleted in memory but not in store: {e}")
                    raise
                logger.info(f"Deleted lesson {lesson_id}")
            return lesson

    def _persist(self, lesson: Lesson) -> None:
        try:
            self.store.save(lesson)
        except PersistenceError as e:
            logger.error(f"Lesson {lesson.id} updated in memory but not saved: {e}")
            raise

    # =========================================================================
    # Views
    # =========================================================================

    def get(self, lesson_id: str) -> Lesson | None:
        with self._lock:
            return _snapshot(self.scheduler.get(lesson_id))

    def require(self, lesson_id: str) -> Lesson:
        with self._lock:
            return _snapshot(self.scheduler.require(lesson_id))

    def due_today(self) -> list[Lesson]:
        with self._lock:
            return [_snapshot(lesson) for lesson in self.scheduler.due_today()]

    def search(self, query: str = "", tag: str = "") -> list[Lesson]:
        with self._lock:
            return [_snapshot(lesson) for lesson in self.scheduler.search(query, tag)]

    def stats(self) -> LessonStats:
        with self._lock:
            return self.scheduler.stats()

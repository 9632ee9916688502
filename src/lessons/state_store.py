"""
SQLAlchemy-backed lesson store.

Provides persistence for the lesson collection:
- Load every lesson at startup
- Upsert a lesson after each mutation
- Delete a lesson
- JSON backup export/import

Default database: ~/.lemon_learn/lessons.db (see Settings.database_url)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from loguru import logger
from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import SQLAlchemyError

from src.db.database import (
    create_db_engine,
    get_engine,
    init_db,
    make_session_factory,
    session_scope,
)
from src.db.models import LessonRecord

from .errors import PersistenceError
from .models import Lesson, LessonStatus


class LessonStore:
    """
    Database access layer for lessons.

    Every public method opens its own transaction.
    """

    def __init__(self, database_url: str | None = None, engine: Engine | None = None):
        """
        Initialize the store and create tables if needed.

        Args:
            database_url: SQLAlchemy URL (ignored when `engine` is given)
            engine: Existing engine to reuse
        """
        if engine is None:
            engine = create_db_engine(database_url) if database_url else get_engine()
        self.engine = engine
        self._session_factory = make_session_factory(engine)

        try:
            init_db(engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not initialize lesson store: {e}") from e

        logger.info(f"LessonStore initialized at {engine.url.render_as_string(hide_password=True)}")

    def load_all(self) -> list[Lesson]:
        """
        Load every lesson, oldest first.

        Returns:
            List of Lessons ordered by created_at
        """
        try:
            with session_scope(self._session_factory) as session:
                rows = session.scalars(
                    select(LessonRecord).order_by(LessonRecord.created_at, LessonRecord.id)
                ).all()
                lessons = [_to_lesson(row) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not load lessons: {e}") from e

        logger.info(f"Loaded {len(lessons)} lessons from store")
        return lessons

    def save(self, lesson: Lesson) -> None:
        """Insert or update one lesson."""
        try:
            with session_scope(self._session_factory) as session:
                session.merge(_to_record(lesson))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not save lesson {lesson.id}: {e}") from e

    def save_many(self, lessons: list[Lesson]) -> int:
        """Upsert several lessons in one transaction."""
        try:
            with session_scope(self._session_factory) as session:
                for lesson in lessons:
                    session.merge(_to_record(lesson))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not save lessons: {e}") from e
        return len(lessons)

    def delete(self, lesson_id: str) -> bool:
        """Delete a lesson. Returns whether a row was removed."""
        try:
            with session_scope(self._session_factory) as session:
                result = session.execute(delete(LessonRecord).where(LessonRecord.id == lesson_id))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not delete lesson {lesson_id}: {e}") from e
        return result.rowcount > 0

    # =========================================================================
    # Backup
    # =========================================================================

    def export_json(self, path: Path | str) -> int:
        """
        Write every lesson to a JSON file.

        Returns:
            Number of lessons written
        """
        lessons = self.load_all()
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(
                json.dumps([lesson.to_dict() for lesson in lessons], indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as e:
            raise PersistenceError(f"Could not write backup {target}: {e}") from e

        logger.info(f"Exported {len(lessons)} lessons to {target}")
        return len(lessons)

    def import_json(self, path: Path | str) -> int:
        """
        Upsert lessons from a JSON backup written by export_json.

        Returns:
            Number of lessons imported
        """
        source = Path(path)
        try:
            records = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read backup {source}: {e}") from e

        if not isinstance(records, list):
            raise PersistenceError(f"Backup {source} must contain a list of lessons")

        try:
            lessons = [Lesson.from_dict(record) for record in records]
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Invalid lesson record in {source}: {e}") from e

        count = self.save_many(lessons)
        logger.info(f"Imported {count} lessons from {source}")
        return count

    def close(self) -> None:
        """Dispose of pooled connections."""
        self.engine.dispose()


def _to_record(lesson: Lesson) -> LessonRecord:
    return LessonRecord(
        id=lesson.id,
        title=lesson.title,
        note=lesson.note,
        tag=lesson.tag,
        link=lesson.link,
        created_at=_to_utc(lesson.created_at),
        status=lesson.status.value,
        reviews=lesson.reviews,
        next_review=_to_utc(lesson.next_review) if lesson.next_review else None,
    )


def _to_lesson(record: LessonRecord) -> Lesson:
    return Lesson(
        id=record.id,
        title=record.title,
        note=record.note,
        tag=record.tag,
        link=record.link,
        created_at=_from_utc(record.created_at),
        status=LessonStatus.parse(record.status),
        reviews=record.reviews,
        next_review=_from_utc(record.next_review) if record.next_review else None,
    )


def _to_utc(value: datetime) -> datetime:
    # Naive values are already UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)

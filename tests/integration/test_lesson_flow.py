"""
Integration Tests for the Lesson Flow.

Tests the full path over a file-backed SQLite database:
1. LessonService creates and reviews lessons
2. LessonStore persists every mutation
3. A restarted service picks up where the last one stopped
4. DueReminder reports today's due lessons
"""

from datetime import timedelta

import pytest

from config import Settings
from src.lessons import DueReminder, LessonService, LessonStatus
from tests.support import START, FixedClock

pytestmark = pytest.mark.integration


@pytest.fixture
def settings(tmp_path):
    return Settings(_env_file=None, database_url=f"sqlite:///{tmp_path / 'lessons.db'}")


def restart(settings, clock) -> LessonService:
    return LessonService.from_settings(settings, clock=clock)


def test_two_weeks_of_reviews(settings):
    clock = FixedClock(START)
    service = restart(settings, clock)
    algebra = service.create("Algebra", tag="math")
    cells = service.create("Cells", tag="biology")
    service.store.close()

    # Day 1: both due, review algebra only
    clock.advance(days=1)
    service = restart(settings, clock)
    assert {lesson.id for lesson in service.due_today()} == {algebra.id, cells.id}
    service.mark_reviewed(algebra.id)
    service.store.close()

    # Day 4: algebra due again (3-day interval)
    clock.advance(days=3)
    service = restart(settings, clock)
    assert [lesson.id for lesson in service.due_today()] == [algebra.id]
    reviewed = service.mark_reviewed(algebra.id)
    assert reviewed.reviews == 2
    assert reviewed.next_review == clock.current + timedelta(days=7)
    service.store.close()

    # Day 11: second interval was 7 days
    clock.advance(days=7)
    service = restart(settings, clock)
    assert [lesson.id for lesson in service.due_today()] == [algebra.id]
    stats = service.stats()
    assert (stats.total, stats.reviewed_count, stats.pending_count) == (2, 1, 1)

    service.reset_review(algebra.id)
    service.delete(cells.id)
    service.store.close()

    service = restart(settings, clock)
    [lesson] = service.search()
    assert lesson.status is LessonStatus.NOT_REVIEWED
    assert lesson.reviews == 0
    service.store.close()


def test_reminder_reads_service(settings):
    clock = FixedClock(START)
    service = restart(settings, clock)
    service.create("Algebra")
    clock.advance(days=1)
    delivered = []

    reminder = DueReminder(service.due_today, deliver=delivered.append)

    assert reminder.check() == "You have 1 lesson to review today!"
    assert delivered == ["You have 1 lesson to review today!"]
    service.store.close()

"""
Lesson Scheduler: spaced-repetition state for a collection of lessons.

Implements:
- Fixed escalating review intervals (1, 3, 7, 14, 30 days)
- Lesson lifecycle (create, review, reset, delete)
- Derived views (due today, search, stats)

Interval selection uses the review count *before* the review is recorded,
offset by one: the first review schedules 3 days out, the next 7, then 14,
then 30 forever. The 1-day slot is only used when a lesson is created or
reset.

The scheduler is in-memory and synchronous. Callers persist after each
mutation and serialize mutations if they share an instance across threads.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta, tzinfo

from loguru import logger

from .errors import DuplicateLessonError, InvalidLessonError, LessonNotFoundError
from .models import Lesson, LessonStats, LessonStatus

REVIEW_INTERVALS: tuple[int, ...] = (1, 3, 7, 14, 30)
INITIAL_INTERVAL_DAYS = REVIEW_INTERVALS[0]

Clock = Callable[[], datetime]


def system_clock(tz: tzinfo | None = None) -> Clock:
    """
    Build a clock reading the current time in `tz`.

    With no zone the machine's local zone is read on every call, so a
    long-running process follows DST changes.
    """

    def now() -> datetime:
        if tz is None:
            return datetime.now().astimezone()
        return datetime.now(tz)

    return now


def next_interval_days(reviews: int) -> int:
    """
    Days until the next review for a lesson with `reviews` prior reviews.

    Args:
        reviews: Review count before the review being recorded

    Returns:
        Interval in days from REVIEW_INTERVALS
    """
    if reviews < 0:
        raise ValueError(f"reviews must be non-negative, got {reviews}")
    index = min(reviews + 1, len(REVIEW_INTERVALS) - 1)
    return REVIEW_INTERVALS[index]


class LessonScheduler:
    """
    Owns the lesson collection and every rule that changes it.

    Lessons are keyed by id. Views list the newest lesson first.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        tz: tzinfo | None = None,
        require_title: bool = False,
    ):
        """
        Initialize the scheduler.

        Args:
            clock: Callable returning "now" (system clock if None)
            tz: Reference zone for calendar-day checks. Defaults to the
                injected clock's zone, else the machine's local zone,
                which is then represented as None.
            require_title: Reject blank titles on create
        """
        if tz is None and clock is not None:
            tz = clock().tzinfo
        self._clock = clock or system_clock(tz)
        self.tz: tzinfo | None = tz
        self.require_title = require_title
        self._lessons: dict[str, Lesson] = {}

    # =========================================================================
    # Time helpers
    # =========================================================================

    def now(self) -> datetime:
        """Current instant from the injected clock, always zone-aware."""
        return self._as_aware(self._clock())

    def today(self) -> date:
        """Current calendar date in the reference zone."""
        return self.local_date(self.now())

    def local_date(self, moment: datetime) -> date:
        """Calendar date of `moment` in the reference zone."""
        return self._in_zone(moment).date()

    def add_days(self, moment: datetime, days: int) -> datetime:
        """
        Move `moment` by whole days, keeping the local wall-clock time.

        Across a DST change the UTC offset of the result differs from the
        input, so the calendar date lands where a person would expect.
        """
        if self.tz is None:
            # System zone: do the arithmetic on local wall time
            wall = self._in_zone(moment).replace(tzinfo=None) + timedelta(days=days)
            return wall.astimezone()
        return self._in_zone(moment) + timedelta(days=days)

    def _in_zone(self, moment: datetime) -> datetime:
        return self._as_aware(moment).astimezone(self.tz)

    def _as_aware(self, moment: datetime) -> datetime:
        # Naive timestamps are taken to be in the reference zone
        if moment.tzinfo is not None:
            return moment
        if self.tz is None:
            return moment.astimezone()
        return moment.replace(tzinfo=self.tz)

    # =========================================================================
    # Collection access
    # =========================================================================

    def __len__(self) -> int:
        return len(self._lessons)

    def __contains__(self, lesson_id: object) -> bool:
        return lesson_id in self._lessons

    @property
    def lessons(self) -> list[Lesson]:
        """All lessons, newest first."""
        return list(reversed(self._lessons.values()))

    def get(self, lesson_id: str) -> Lesson | None:
        return self._lessons.get(lesson_id)

    def require(self, lesson_id: str) -> Lesson:
        """Get a lesson or raise LessonNotFoundError."""
        lesson = self._lessons.get(lesson_id)
        if lesson is None:
            raise LessonNotFoundError(lesson_id)
        return lesson

    def load(self, lessons: Iterable[Lesson]) -> int:
        """
        Replace the collection with previously stored lessons.

        Lessons are expected oldest first; the last one becomes the newest.

        Returns:
            Number of lessons loaded
        """
        loaded: dict[str, Lesson] = {}
        for lesson in lessons:
            if lesson.id in loaded:
                raise DuplicateLessonError(lesson.id)
            loaded[lesson.id] = lesson
        self._lessons = loaded
        logger.debug(f"Loaded {len(loaded)} lessons")
        return len(loaded)

    # =========================================================================
    # Mutations
    # =========================================================================

    def create(self, title: str, note: str = "", tag: str = "", link: str = "") -> Lesson:
        """
        Create a lesson due tomorrow.

        Returns:
            The new Lesson (status not-reviewed, reviews 0)
        """
        if self.require_title and not title.strip():
            raise InvalidLessonError("Lesson title must not be blank")

        now = self.now()
        lesson_id = uuid.uuid4().hex
        while lesson_id in self._lessons:
            lesson_id = uuid.uuid4().hex

        lesson = Lesson(
            id=lesson_id,
            title=title,
            note=note,
            tag=tag,
            link=link,
            created_at=now,
            status=LessonStatus.NOT_REVIEWED,
            reviews=0,
            next_review=self.add_days(now, INITIAL_INTERVAL_DAYS),
        )
        self._lessons[lesson.id] = lesson

        logger.debug(f"Created lesson {lesson.id} ({title!r}), next_review={lesson.next_review}")
        return lesson

    def mark_reviewed(self, lesson_id: str) -> Lesson | None:
        """
        Record a review and push the next review date out.

        Returns:
            Updated Lesson, or None if no lesson has this id
        """
        lesson = self._lessons.get(lesson_id)
        if lesson is None:
            logger.debug(f"mark_reviewed ignored, no lesson {lesson_id}")
            return None

        interval = next_interval_days(lesson.reviews)
        lesson.status = LessonStatus.REVIEWED
        lesson.reviews += 1
        lesson.next_review = self.add_days(self.now(), interval)

        logger.debug(
            f"Reviewed lesson {lesson_id}: reviews={lesson.reviews}, "
            f"interval={interval}d, next_review={lesson.next_review}"
        )
        return lesson

    def reset_review(self, lesson_id: str) -> Lesson | None:
        """
        Send a lesson back to the start of the interval table.

        Returns:
            Updated Lesson, or None if no lesson has this id
        """
        lesson = self._lessons.get(lesson_id)
        if lesson is None:
            logger.debug(f"reset_review ignored, no lesson {lesson_id}")
            return None

        lesson.status = LessonStatus.NOT_REVIEWED
        lesson.reviews = 0
        lesson.next_review = self.add_days(self.now(), INITIAL_INTERVAL_DAYS)

        logger.debug(f"Reset lesson {lesson_id}, next_review={lesson.next_review}")
        return lesson

    def delete(self, lesson_id: str) -> Lesson | None:
        """Remove a lesson. Returns the removed Lesson, or None if absent."""
        lesson = self._lessons.pop(lesson_id, None)
        if lesson is None:
            logger.debug(f"delete ignored, no lesson {lesson_id}")
        else:
            logger.debug(f"Deleted lesson {lesson_id}")
        return lesson

    # =========================================================================
    # Views
    # =========================================================================

    def is_due_today(self, lesson: Lesson, today: date | None = None) -> bool:
        """
        Whether the lesson's next review falls on today's calendar date.

        Args:
            lesson: Lesson to check
            today: Date to compare against (read from the clock if None)
        """
        if lesson.next_review is None:
            return False
        return self.local_date(lesson.next_review) == (today or self.today())

    def due_today(self) -> list[Lesson]:
        """Lessons whose next review is on today's date in the reference zone."""
        today = self.today()
        return [lesson for lesson in self.lessons if self.is_due_today(lesson, today)]

    def search(self, query: str = "", tag: str = "") -> list[Lesson]:
        """
        Filter lessons by text and tag.

        Args:
            query: Case-insensitive substring of title or note ("" matches all)
            tag: Case-insensitive substring of the tag ("" matches all)
        """
        needle = query.lower()
        tag_needle = tag.lower()
        return [
            lesson
            for lesson in self.lessons
            if (not tag_needle or tag_needle in lesson.tag.lower())
            and (needle in lesson.title.lower() or needle in lesson.note.lower())
        ]

    def stats(self) -> LessonStats:
        """Count lessons by status."""
        reviewed = sum(1 for lesson in self._lessons.values() if lesson.status is LessonStatus.REVIEWED)
        total = len(self._lessons)
        return LessonStats(
            total=total,
            reviewed_count=reviewed,
            pending_count=total - reviewed,
        )

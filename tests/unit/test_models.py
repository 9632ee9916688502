"""
Unit tests for Lesson serialization.
"""

from datetime import datetime, timezone

import pytest

from src.lessons import Lesson, LessonStatus


class TestLessonStatus:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("reviewed", LessonStatus.REVIEWED),
            ("not-reviewed", LessonStatus.NOT_REVIEWED),
            ("not reviewed", LessonStatus.NOT_REVIEWED),
            ("NOT_REVIEWED", LessonStatus.NOT_REVIEWED),
        ],
    )
    def test_parse(self, raw, expected):
        assert LessonStatus.parse(raw) is expected

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            LessonStatus.parse("archived")


class TestFromDict:
    """Stored records in the camelCase shape."""

    def test_camel_case_record(self, sample_lesson_record):
        lesson = Lesson.from_dict(sample_lesson_record)

        assert lesson.id == "lesson-001"
        assert lesson.tag == "math"
        assert lesson.status is LessonStatus.NOT_REVIEWED
        assert lesson.created_at == datetime(2024, 3, 1, 2, 30, tzinfo=timezone.utc)
        assert lesson.next_review == datetime(2024, 3, 2, 2, 30, tzinfo=timezone.utc)
        assert lesson.has_link

    def test_missing_optional_fields(self):
        lesson = Lesson.from_dict({"id": 7, "createdAt": "2024-03-01T10:00:00+07:00"})

        assert lesson.id == "7"
        assert (lesson.title, lesson.note, lesson.tag, lesson.link) == ("", "", "", "")
        assert lesson.reviews == 0
        assert lesson.next_review is None

    def test_zone_less_timestamps_are_utc(self, sample_lesson_record):
        sample_lesson_record["nextReview"] = "2024-03-02T02:30:00"
        sample_lesson_record["createdAt"] = datetime(2024, 3, 1, 2, 30)

        lesson = Lesson.from_dict(sample_lesson_record)

        assert lesson.next_review == datetime(2024, 3, 2, 2, 30, tzinfo=timezone.utc)
        assert lesson.next_review.tzinfo is timezone.utc
        assert lesson.created_at == datetime(2024, 3, 1, 2, 30, tzinfo=timezone.utc)

    def test_negative_reviews_rejected(self, sample_lesson_record):
        sample_lesson_record["reviews"] = -2
        with pytest.raises(ValueError):
            Lesson.from_dict(sample_lesson_record)

    def test_bad_timestamp_rejected(self, sample_lesson_record):
        sample_lesson_record["createdAt"] = ""
        with pytest.raises(ValueError):
            Lesson.from_dict(sample_lesson_record)


def test_to_dict_uses_record_keys(sample_lesson_record):
    lesson = Lesson.from_dict(sample_lesson_record)
    lesson.status = LessonStatus.REVIEWED
    lesson.reviews = 2

    data = lesson.to_dict()

    assert data["status"] == "reviewed"
    assert data["reviews"] == 2
    assert data["createdAt"] == "2024-03-01T02:30:00+00:00"
    assert Lesson.from_dict(data) == lesson

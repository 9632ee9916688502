"""
Lesson domain models.

A Lesson is the single trackable study item. Its scheduling fields
(status, reviews, next_review) are only changed by the LessonScheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class LessonStatus(str, Enum):
    """Review status of a lesson."""

    NOT_REVIEWED = "not-reviewed"
    REVIEWED = "reviewed"

    @classmethod
    def parse(cls, value: str) -> LessonStatus:
        """Parse a stored status, accepting the older "not reviewed" spelling."""
        normalized = value.strip().lower().replace(" ", "-").replace("_", "-")
        return cls(normalized)


@dataclass
class Lesson:
    """One study lesson with its spaced-repetition state."""

    id: str
    title: str
    note: str
    tag: str
    link: str
    created_at: datetime
    status: LessonStatus = LessonStatus.NOT_REVIEWED
    reviews: int = 0
    next_review: datetime | None = None

    @property
    def has_link(self) -> bool:
        return bool(self.link)

    @property
    def is_reviewed(self) -> bool:
        return self.status is LessonStatus.REVIEWED

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase record shape."""
        return {
            "id": self.id,
            "title": self.title,
            "note": self.note,
            "tag": self.tag,
            "link": self.link,
            "createdAt": _format_timestamp(self.created_at),
            "status": self.status.value,
            "reviews": self.reviews,
            "nextReview": _format_timestamp(self.next_review),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lesson:
        """
        Build a Lesson from a stored record.

        Accepts both camelCase (createdAt/nextReview) and snake_case keys.
        Timestamps come back in UTC; ones written without a zone are read
        as UTC.
        """
        created_at = data.get("createdAt", data.get("created_at"))
        next_review = data.get("nextReview", data.get("next_review"))
        reviews = int(data.get("reviews") or 0)
        if reviews < 0:
            raise ValueError(f"reviews must be non-negative, got {reviews}")

        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            note=data.get("note") or "",
            tag=data.get("tag") or "",
            link=data.get("link") or "",
            created_at=_parse_timestamp(created_at),
            status=LessonStatus.parse(data.get("status") or LessonStatus.NOT_REVIEWED.value),
            reviews=reviews,
            next_review=_parse_timestamp(next_review) if next_review else None,
        )


@dataclass(frozen=True)
class LessonStats:
    """Aggregate counts over a lesson collection."""

    total: int
    reviewed_count: int
    pending_count: int


def _format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def _parse_timestamp(value: Any) -> datetime:
    # Stored timestamps without a zone are UTC, like the rows in LessonStore
    if isinstance(value, str) and value:
        # ISO strings written by JavaScript end in "Z"
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        value = datetime.fromisoformat(value)
    if not isinstance(value, datetime):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

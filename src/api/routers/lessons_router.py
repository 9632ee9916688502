"""
Lessons router.

One endpoint per scheduler operation. Responses carry the full lesson.
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from src.lessons import Lesson, LessonService, LessonStatus

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class LessonCreate(BaseModel):
    """Model for a new lesson."""

    title: str
    note: str = ""
    tag: str = ""
    link: str = ""


class LessonOut(BaseModel):
    """Model for a lesson in responses."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    note: str
    tag: str
    link: str
    created_at: datetime = Field(alias="createdAt")
    status: LessonStatus
    reviews: int
    next_review: datetime | None = Field(alias="nextReview")

    @classmethod
    def from_lesson(cls, lesson: Lesson) -> LessonOut:
        return cls(
            id=lesson.id,
            title=lesson.title,
            note=lesson.note,
            tag=lesson.tag,
            link=lesson.link,
            created_at=lesson.created_at,
            status=lesson.status,
            reviews=lesson.reviews,
            next_review=lesson.next_review,
        )


class LessonStatsOut(BaseModel):
    """Response model for lesson counts."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    reviewed_count: int = Field(alias="reviewedCount")
    pending_count: int = Field(alias="pendingCount")


def get_service(request: Request) -> LessonService:
    """FastAPI dependency returning the app's lesson service."""
    return request.app.state.lesson_service


def _not_found(lesson_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lesson not found: {lesson_id}")


# ========================================
# Views
# ========================================


@router.get("", response_model=List[LessonOut], response_model_by_alias=True, summary="Search lessons")
def search_lessons(
    q: str = "",
    tag: str = "",
    service: LessonService = Depends(get_service),
) -> List[LessonOut]:
    """
    List lessons, newest first.

    - q: case-insensitive text in title or note
    - tag: case-insensitive text in tag
    """
    return [LessonOut.from_lesson(lesson) for lesson in service.search(q, tag)]


@router.get("/due", response_model=List[LessonOut], response_model_by_alias=True, summary="Lessons due today")
def due_today(service: LessonService = Depends(get_service)) -> List[LessonOut]:
    return [LessonOut.from_lesson(lesson) for lesson in service.due_today()]


@router.get("/stats", response_model=LessonStatsOut, response_model_by_alias=True, summary="Lesson counts")
def lesson_stats(service: LessonService = Depends(get_service)) -> LessonStatsOut:
    result = service.stats()
    return LessonStatsOut(
        total=result.total,
        reviewed_count=result.reviewed_count,
        pending_count=result.pending_count,
    )


@router.get("/{lesson_id}", response_model=LessonOut, response_model_by_alias=True, summary="Get lesson")
def get_lesson(lesson_id: str, service: LessonService = Depends(get_service)) -> LessonOut:
    lesson = service.get(lesson_id)
    if lesson is None:
        raise _not_found(lesson_id)
    return LessonOut.from_lesson(lesson)


# ========================================
# Mutations
# ========================================


@router.post(
    "",
    response_model=LessonOut,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create lesson",
)
def create_lesson(payload: LessonCreate, service: LessonService = Depends(get_service)) -> LessonOut:
    """Create a lesson due tomorrow."""
    lesson = service.create(payload.title, note=payload.note, tag=payload.tag, link=payload.link)
    return LessonOut.from_lesson(lesson)


@router.post("/{lesson_id}/review", response_model=LessonOut, response_model_by_alias=True, summary="Mark reviewed")
def review_lesson(lesson_id: str, service: LessonService = Depends(get_service)) -> LessonOut:
    lesson = service.mark_reviewed(lesson_id)
    if lesson is None:
        raise _not_found(lesson_id)
    return LessonOut.from_lesson(lesson)


@router.post("/{lesson_id}/reset", response_model=LessonOut, response_model_by_alias=True, summary="Reset review")
def reset_lesson(lesson_id: str, service: LessonService = Depends(get_service)) -> LessonOut:
    lesson = service.reset_review(lesson_id)
    if lesson is None:
        raise _not_found(lesson_id)
    return LessonOut.from_lesson(lesson)


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete lesson")
def delete_lesson(lesson_id: str, service: LessonService = Depends(get_service)) -> None:
    if service.delete(lesson_id) is None:
        raise _not_found(lesson_id)
    logger.info(f"Lesson {lesson_id} deleted via API")

"""
Unit tests for the lessons API.

The app is built around an in-memory service on the fixed clock.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from config import Settings
from src.api.main import create_app
from src.lessons import LessonScheduler, LessonService, LessonStore, PersistenceError


@pytest.fixture
def settings():
    return Settings(_env_file=None, database_url="sqlite://")


@pytest.fixture
def client(settings, service):
    return TestClient(create_app(settings=settings, service=service))


def add(client, title="Algebra", **fields):
    response = client.post("/lessons", json={"title": title, **fields})
    assert response.status_code == 201
    return response.json()


class TestCreate:
    def test_create_returns_full_lesson(self, client):
        body = add(client, note="Quadratics", tag="math", link="https://x.test")

        assert body["title"] == "Algebra"
        assert body["tag"] == "math"
        assert body["status"] == "not-reviewed"
        assert body["reviews"] == 0
        assert body["createdAt"].startswith("2024-03-10T09:30:00")
        assert body["nextReview"].startswith("2024-03-11T09:30:00")

    def test_title_required(self, client):
        assert client.post("/lessons", json={"note": "no title"}).status_code == 422

    def test_blank_title_rejected_when_configured(self, settings, clock, store):
        strict = LessonService(LessonScheduler(clock=clock, require_title=True), store)
        client = TestClient(create_app(settings=settings, service=strict))

        response = client.post("/lessons", json={"title": " "})

        assert response.status_code == 422


class TestMutations:
    def test_review_then_reset(self, client):
        lesson_id = add(client)["id"]

        reviewed = client.post(f"/lessons/{lesson_id}/review").json()
        assert reviewed["status"] == "reviewed"
        assert reviewed["reviews"] == 1
        assert reviewed["nextReview"].startswith("2024-03-13")

        reset = client.post(f"/lessons/{lesson_id}/reset").json()
        assert reset["status"] == "not-reviewed"
        assert reset["reviews"] == 0
        assert reset["nextReview"].startswith("2024-03-11")

    def test_delete(self, client):
        lesson_id = add(client)["id"]

        assert client.delete(f"/lessons/{lesson_id}").status_code == 204
        assert client.get(f"/lessons/{lesson_id}").status_code == 404

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/lessons/missing"),
            ("post", "/lessons/missing/review"),
            ("post", "/lessons/missing/reset"),
            ("delete", "/lessons/missing"),
        ],
    )
    def test_missing_lesson_is_404(self, client, method, path):
        assert getattr(client, method)(path).status_code == 404

    def test_store_failure_is_503(self, settings, scheduler):
        store = Mock(spec=LessonStore)
        store.save.side_effect = PersistenceError("disk full")
        client = TestClient(create_app(settings=settings, service=LessonService(scheduler, store)))

        response = client.post("/lessons", json={"title": "Algebra"})

        assert response.status_code == 503


class TestViews:
    def test_search(self, client):
        add(client, "Algebra", tag="math")
        add(client, "Cells", note="mitosis", tag="biology")

        assert [lesson["title"] for lesson in client.get("/lessons").json()] == ["Cells", "Algebra"]
        assert [lesson["title"] for lesson in client.get("/lessons", params={"tag": "MATH"}).json()] == ["Algebra"]
        assert [lesson["title"] for lesson in client.get("/lessons", params={"q": "mitosis"}).json()] == ["Cells"]

    def test_due_today(self, client, clock):
        lesson_id = add(client)["id"]
        assert client.get("/lessons/due").json() == []

        clock.advance(days=1)

        assert [lesson["id"] for lesson in client.get("/lessons/due").json()] == [lesson_id]

    def test_stats(self, client):
        first = add(client)["id"]
        add(client, "Cells")
        client.post(f"/lessons/{first}/review")

        assert client.get("/lessons/stats").json() == {"total": 2, "reviewedCount": 1, "pendingCount": 1}


def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["components"]["database"] == "ok"

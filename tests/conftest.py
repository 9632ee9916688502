"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.lessons import LessonScheduler, LessonService, LessonStore  # noqa: E402
from tests.support import START, FixedClock  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (file-backed database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    """Clock frozen at 2024-03-10 09:30 UTC+7."""
    return FixedClock(START)


@pytest.fixture
def scheduler(clock):
    """Empty scheduler on the fixed clock."""
    return LessonScheduler(clock=clock)


@pytest.fixture
def store():
    """Lesson store on a private in-memory database."""
    lesson_store = LessonStore("sqlite://")
    yield lesson_store
    lesson_store.close()


@pytest.fixture
def service(scheduler, store):
    """Scheduler wired to the in-memory store."""
    return LessonService(scheduler, store)


@pytest.fixture
def sample_lesson_record():
    """Provide a stored lesson record in the camelCase shape."""
    return {
        "id": "lesson-001",
        "title": "Algebra",
        "note": "Quadratic formula",
        "tag": "math",
        "link": "https://example.com/algebra",
        "createdAt": "2024-03-01T02:30:00.000Z",
        "status": "not reviewed",
        "reviews": 0,
        "nextReview": "2024-03-02T02:30:00.000Z",
    }

"""Shared test helpers."""

from datetime import datetime, timedelta, timezone

# Fixed UTC+7 zone so calendar-day tests don't depend on the machine
TEST_TZ = timezone(timedelta(hours=7))
START = datetime(2024, 3, 10, 9, 30, tzinfo=TEST_TZ)


class FixedClock:
    """Controllable time source."""

    def __init__(self, start: datetime = START):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current

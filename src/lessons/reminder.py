"""
Due-lesson reminders.

Periodically checks today's due list and delivers a short message when
there is something to review and reminders are permitted.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from .models import Lesson

Deliver = Callable[[str], None]


@dataclass
class ReminderConfig:
    """Configuration for the reminder loop."""

    interval_minutes: int = 60
    enabled: bool = True


def format_reminder(count: int) -> str:
    noun = "lesson" if count == 1 else "lessons"
    return f"You have {count} {noun} to review today!"


def log_delivery(message: str) -> None:
    logger.info(message)


class DueReminder:
    """
    Hourly "lessons due today" notifier.

    Only reads from the lesson collection via `due_today`.
    """

    def __init__(
        self,
        due_today: Callable[[], list[Lesson]],
        deliver: Deliver | None = None,
        config: ReminderConfig | None = None,
    ):
        """
        Initialize the reminder.

        Args:
            due_today: Callable returning today's due lessons
            deliver: Callable that shows a message (logs it if None)
            config: Interval and permission settings
        """
        self._due_today = due_today
        self._deliver = deliver or log_delivery
        self.config = config or ReminderConfig()

    @property
    def interval_seconds(self) -> float:
        return self.config.interval_minutes * 60.0

    def check(self) -> str | None:
        """
        Run one reminder tick.

        Returns:
            The delivered message, or None if nothing was sent
        """
        if not self.config.enabled:
            logger.debug("Reminders disabled, skipping check")
            return None

        due = self._due_today()
        if not due:
            logger.debug("No lessons due today")
            return None

        message = format_reminder(len(due))
        self._deliver(message)
        return message

    def run(self, stop_event: threading.Event, max_ticks: int | None = None) -> int:
        """
        Check on every interval until `stop_event` is set.

        The first check happens after one full interval.

        Args:
            stop_event: Set to end the loop
            max_ticks: Stop after this many checks (unbounded if None)

        Returns:
            Number of reminders delivered
        """
        delivered = 0
        ticks = 0
        logger.info(f"Reminder loop started (every {self.config.interval_minutes} min)")

        while not stop_event.wait(self.interval_seconds):
            if self.check() is not None:
                delivered += 1
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break

        logger.info(f"Reminder loop stopped after {ticks} checks")
        return delivered

    def start(self, stop_event: threading.Event) -> threading.Thread:
        """Run the loop on a daemon thread."""
        thread = threading.Thread(
            target=self.run,
            args=(stop_event,),
            name="due-reminder",
            daemon=True,
        )
        thread.start()
        return thread

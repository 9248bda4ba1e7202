"""Notification sinks for interval completion."""

import logging
from typing import Protocol

from rich.console import Console

from pomo_cli.models.focus.engine import CompletionEvent, TimerState

logger = logging.getLogger(__name__)

TITLES = {
    TimerState.WORK: "🍅 Work session complete!",
    TimerState.SHORT_BREAK: "☕ Short break over!",
    TimerState.LONG_BREAK: "🌴 Long break over!",
}


def build_notification(event: CompletionEvent) -> tuple[str, str]:
    """(title, body) for a completion event."""
    title = TITLES[event.state]
    if event.task_name:
        body = f"Task: {event.task_name}"
    else:
        body = "Time for the next phase!"
    return title, body


class Notifier(Protocol):
    """Receives completion notifications. Delivery is best effort."""

    def notify(self, title: str, body: str) -> bool: ...


class ConsoleNotifier:
    """Rings the terminal bell and logs the message."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def notify(self, title: str, body: str) -> bool:
        logger.info("Notification: %s - %s", title, body)
        self.console.bell()
        return True


class NullNotifier:
    """Discards notifications; keeps what it was sent for inspection."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def notify(self, title: str, body: str) -> bool:
        self.sent.append((title, body))
        return True

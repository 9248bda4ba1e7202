"""Injectable time sources for the focus engine."""

import time
from datetime import date, datetime
from typing import Protocol


class Clock(Protocol):
    """Supplies monotonic instants and civil date/time."""

    def now_instant(self) -> float:
        """Monotonic seconds, only meaningful as a difference."""
        ...

    def now(self) -> datetime:
        """Timezone-aware wall-clock time."""
        ...

    def today(self) -> date:
        """Civil date used for day boundaries."""
        ...


class SystemClock:
    """Clock backed by the host's monotonic and local wall clocks."""

    def now_instant(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def today(self) -> date:
        return self.now().date()

"""Session history with streak tracking and focus statistics."""

import uuid
from datetime import date, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .clock import Clock

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class SessionType(str, Enum):
    """Kind of interval a session records."""

    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class Session(BaseModel):
    """A completed Pomodoro interval. Immutable once recorded."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime
    session_type: SessionType
    duration_secs: int = Field(ge=0)
    completed: bool = True
    task_name: str | None = None
    note: str | None = None

    @property
    def date(self) -> date:
        """Civil date the session was recorded on."""
        return self.timestamp.date()

    @property
    def is_work(self) -> bool:
        return self.session_type == SessionType.WORK

    @classmethod
    def create(
        cls,
        session_type: SessionType | str,
        duration_secs: int,
        clock: Clock,
        task_name: str | None = None,
        note: str | None = None,
    ) -> "Session":
        """Create a session stamped with the clock's current time."""
        return cls(
            timestamp=clock.now(),
            session_type=SessionType(session_type),
            duration_secs=duration_secs,
            task_name=task_name,
            note=note,
        )


class SessionHistory(BaseModel):
    """Append-only session log plus streak counters.

    ``current_streak`` counts consecutive calendar days with at least one
    work session; ``longest_streak`` never drops below it after an update.
    """

    model_config = ConfigDict(extra="ignore")

    sessions: list[Session] = Field(default_factory=list)
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_session_date: date | None = None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, session: Session) -> None:
        """Append *session*; work sessions also advance the streak."""
        if session.is_work:
            self.update_streak(session.date)
        self.sessions.append(session)

    def update_streak(self, session_date: date) -> None:
        """Fold a work session on *session_date* into the streak counters."""
        if self.last_session_date is None:
            self.current_streak = 1
            self.longest_streak = max(self.longest_streak, 1)
        else:
            days_diff = (session_date - self.last_session_date).days
            if days_diff == 0:
                return
            if days_diff == 1:
                self.current_streak += 1
            else:
                self.current_streak = 1
            self.longest_streak = max(self.longest_streak, self.current_streak)

        self.last_session_date = session_date

    def recalculate_on_load(self, today: date) -> None:
        """Zero the current streak if a whole day passed without work."""
        if self.last_session_date is None:
            return
        if (today - self.last_session_date).days > 1:
            self.current_streak = 0

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def _work_sessions(self) -> list[Session]:
        return [s for s in self.sessions if s.is_work]

    def _work_on(self, day: date) -> list[Session]:
        return [s for s in self.sessions if s.is_work and s.date == day]

    def today_pomodoro_count(self, clock: Clock) -> int:
        return len(self._work_on(clock.today()))

    def today_focus_secs(self, clock: Clock) -> int:
        return sum(s.duration_secs for s in self._work_on(clock.today()))

    def week_focus_secs(self, clock: Clock) -> int:
        """Focus seconds since Monday of the current week."""
        today = clock.today()
        week_start = today - timedelta(days=today.weekday())
        return sum(
            s.duration_secs
            for s in self._work_sessions()
            if week_start <= s.date <= today
        )

    def total_focus_secs(self) -> int:
        return sum(s.duration_secs for s in self._work_sessions())

    def total_work_sessions(self) -> int:
        return len(self._work_sessions())

    def last_7_days_focus(self, clock: Clock) -> list[tuple[str, int]]:
        """Per-day focus seconds for the last seven days, oldest first."""
        today = clock.today()
        buckets = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            secs = sum(s.duration_secs for s in self._work_on(day))
            buckets.append((WEEKDAY_LABELS[day.weekday()], secs))
        return buckets

    def recent_sessions(self, count: int) -> list[Session]:
        """The *count* newest sessions, newest first."""
        if count <= 0:
            return []
        return list(reversed(self.sessions[-count:]))

    def daily_goal_progress(self, goal: int, clock: Clock) -> tuple[int, int]:
        """(work sessions today, goal)."""
        return self.today_pomodoro_count(clock), goal

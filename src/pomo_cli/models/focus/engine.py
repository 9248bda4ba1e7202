"""Drift-corrected countdown and Pomodoro cycle state machine.

Remaining time is never decremented tick by tick. On resume the engine
snapshots ``start_remaining`` and a monotonic ``start_anchor``; every query
derives the remaining time from the elapsed time since that anchor, so the
number of ticks (or pause/resume cycles) has no effect on accuracy.

Pomodoro transitions (completion or skip)::

    Work        -> ShortBreak   while session_count + 1 < sessions_before_long
    Work        -> LongBreak    otherwise (session_count resets to 0)
    ShortBreak  -> Work
    LongBreak   -> Work

Breaks may auto-start; work never does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Literal

from pomo_cli.models.config_models import SETTING_RANGES, AppConfig, clamp

from .clock import Clock
from .history import SessionType

if TYPE_CHECKING:
    from pomo_cli.models.task import TaskList

logger = logging.getLogger(__name__)

ZERO = timedelta(0)


class TimerState(Enum):
    """Phase of the Pomodoro cycle."""

    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def display_name(self) -> str:
        return {
            TimerState.WORK: "Work",
            TimerState.SHORT_BREAK: "Short Break",
            TimerState.LONG_BREAK: "Long Break",
        }[self]

    @property
    def session_type(self) -> SessionType:
        return SessionType(self.value)

    @property
    def color(self) -> str:
        return {
            TimerState.WORK: "cyan",
            TimerState.SHORT_BREAK: "green",
            TimerState.LONG_BREAK: "magenta",
        }[self]


@dataclass(frozen=True)
class TimerMode:
    """Pomodoro cycling, or a flat countdown of ``duration_secs``."""

    kind: Literal["pomodoro", "timer"] = "pomodoro"
    duration_secs: int = 0

    @classmethod
    def pomodoro(cls) -> TimerMode:
        return cls("pomodoro")

    @classmethod
    def timer(cls, duration_secs: int) -> TimerMode:
        return cls("timer", duration_secs)

    @property
    def is_pomodoro(self) -> bool:
        return self.kind == "pomodoro"


@dataclass(frozen=True)
class CompletionEvent:
    """Emitted by ``tick()`` when an interval runs out."""

    state: TimerState
    duration_secs: int
    task_name: str | None
    task_id: str | None
    mode: TimerMode


class TimerEngine:
    """Countdown/Pomodoro engine driven by an external ``tick()`` loop.

    Invariant: ``is_paused == (start_anchor is None)``.
    """

    def __init__(
        self,
        config: AppConfig,
        clock: Clock,
        tasks: TaskList | None = None,
    ):
        self.config = config
        self.clock = clock
        self.tasks = tasks

        self.state = TimerState.WORK
        if config.default_mode == "timer":
            self.mode = TimerMode.timer(config.work_duration_secs)
        else:
            self.mode = TimerMode.pomodoro()

        self.remaining_time = self.current_duration()
        self.is_paused = True
        self.start_anchor: float | None = None
        self.start_remaining = self.remaining_time

        self.session_count = 0
        # Cached so a mid-cycle config edit does not reshuffle the cycle
        self.sessions_before_long = config.sessions_before_long_break

    # ------------------------------------------------------------------
    # Durations
    # ------------------------------------------------------------------

    def duration_for_state(self, state: TimerState) -> timedelta:
        if state is TimerState.WORK:
            return timedelta(seconds=self.config.work_duration_secs)
        if state is TimerState.SHORT_BREAK:
            return timedelta(seconds=self.config.short_break_secs)
        return timedelta(seconds=self.config.long_break_secs)

    def current_duration(self) -> timedelta:
        """Nominal length of the current interval."""
        if self.mode.is_pomodoro:
            return self.duration_for_state(self.state)
        return timedelta(seconds=self.mode.duration_secs)

    def remaining(self, now: float | None = None) -> timedelta:
        """Live remaining time, without touching engine state."""
        if self.start_anchor is None:
            return self.remaining_time
        if now is None:
            now = self.clock.now_instant()
        elapsed = timedelta(seconds=max(now - self.start_anchor, 0.0))
        return max(self.start_remaining - elapsed, ZERO)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def _start(self, now: float | None = None) -> None:
        self.start_anchor = self.clock.now_instant() if now is None else now
        self.start_remaining = self.remaining_time
        self.is_paused = False

    def _stop(self) -> None:
        self.start_anchor = None
        self.start_remaining = self.remaining_time
        self.is_paused = True

    def toggle_pause(self) -> bool:
        """Pause or resume.

        Returns True when the caller should enter focus mode, i.e. the timer
        was just started and ``focus_mode_on_start`` is set.
        """
        if self.is_paused:
            self._start()
            return self.config.focus_mode_on_start

        self.remaining_time = self.remaining()
        self._stop()
        return False

    def reset(self) -> None:
        """Refill the current interval and pause."""
        self.remaining_time = self.current_duration()
        self._stop()

    def switch_mode(self) -> None:
        """Toggle between Pomodoro cycling and a flat work-length timer."""
        if self.mode.is_pomodoro:
            self.mode = TimerMode.timer(self.config.work_duration_secs)
        else:
            self.mode = TimerMode.pomodoro()
            self.state = TimerState.WORK
            self.session_count = 0
        self.remaining_time = self.current_duration()
        self._stop()

    def skip(self) -> None:
        """Jump to the next Pomodoro phase without recording anything."""
        if not self.mode.is_pomodoro:
            return
        logger.debug("Skipping %s", self.state.display_name)
        self._advance()

    def set_sessions_before_long(self, value: int) -> None:
        low, high = SETTING_RANGES["sessions_before_long_break"]
        self.sessions_before_long = clamp(value, low, high)
        self.session_count = min(self.session_count, self.sessions_before_long)

    def full_reset(self) -> None:
        """Back to a paused Work interval at the start of a cycle."""
        self.state = TimerState.WORK
        self.session_count = 0
        self.remaining_time = self.current_duration()
        self._stop()

    # ------------------------------------------------------------------
    # Time advance
    # ------------------------------------------------------------------

    def tick(self, now: float | None = None) -> CompletionEvent | None:
        """Advance the countdown to *now*; returns an event on completion."""
        if self.is_paused:
            return None

        if now is None:
            now = self.clock.now_instant()
        self.remaining_time = self.remaining(now)
        if self.remaining_time > ZERO:
            return None

        return self._complete(now)

    def _complete(self, now: float) -> CompletionEvent:
        task = self.tasks.selected() if self.tasks is not None else None
        state = self.state if self.mode.is_pomodoro else TimerState.WORK
        event = CompletionEvent(
            state=state,
            duration_secs=int(self.current_duration().total_seconds()),
            task_name=task.name if task else None,
            task_id=task.id if task else None,
            mode=self.mode,
        )

        if state is TimerState.WORK and task is not None:
            task.pomodoros_spent += 1

        logger.info(
            "%s complete (%ss, task=%s)",
            state.display_name,
            event.duration_secs,
            event.task_name,
        )

        if self.mode.is_pomodoro:
            self._advance(now)
        else:
            self.remaining_time = self.current_duration()
            self._stop()
        return event

    def _advance(self, now: float | None = None) -> None:
        if self.state is TimerState.WORK:
            if self.session_count + 1 >= self.sessions_before_long:
                self.state = TimerState.LONG_BREAK
                self.session_count = 0
            else:
                self.state = TimerState.SHORT_BREAK
                self.session_count += 1
        else:
            self.state = TimerState.WORK

        self.remaining_time = self.duration_for_state(self.state)
        self._stop()
        if self.config.auto_start_breaks and self.state is not TimerState.WORK:
            self._start(now)

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def progress(self) -> float:
        """Fraction of the current interval already elapsed (0.0-1.0)."""
        total = self.current_duration().total_seconds()
        if total <= 0:
            return 0.0
        return 1.0 - self.remaining_time.total_seconds() / total

    def formatted_time(self) -> str:
        secs = int(self.remaining_time.total_seconds())
        return f"{secs // 60:02d}:{secs % 60:02d}"

    def mode_display(self) -> str:
        if self.mode.is_pomodoro:
            return f"● Pomodoro: {self.state.display_name}"
        return "○ Timer Mode"

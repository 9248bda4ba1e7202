"""Celebration messages shown when a work session finishes."""

from dataclasses import dataclass

from .clock import Clock
from .history import SessionHistory

# Display lengths in ticks (~100 ms each)
GOAL_TICKS = 50
STREAK_TICKS = 50
HOUR_TICKS = 40

STREAK_MILESTONES = {
    7: "🔥 Amazing! 7-day streak!",
    30: "⭐ Incredible! 30-day streak!",
    100: "🏆 LEGENDARY! 100-day streak!",
}

# (low, high) minutes of focus today, half-open
HOUR_MILESTONES = (
    (60, 85, "💪 1 hour of focus today!"),
    (120, 145, "🚀 2 hours of focus today!"),
)


@dataclass(frozen=True)
class Celebration:
    message: str
    ticks: int


def check_celebration(
    history: SessionHistory, daily_goal: int, clock: Clock
) -> Celebration | None:
    """Pick the celebration for a work session that just ended.

    Runs before the session is added to *history*, so today's count is one
    short of the real value.
    """
    completed, goal = history.daily_goal_progress(daily_goal, clock)
    if completed + 1 == goal:
        return Celebration(f"🎉 Daily goal reached! {goal} pomodoros!", GOAL_TICKS)

    today_mins = history.today_focus_secs(clock) // 60
    for low, high, message in HOUR_MILESTONES:
        if low <= today_mins < high:
            return Celebration(message, HOUR_TICKS)

    message = STREAK_MILESTONES.get(history.current_streak)
    if message is not None:
        return Celebration(message, STREAK_TICKS)

    return None

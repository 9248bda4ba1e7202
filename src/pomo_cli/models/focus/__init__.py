"""Focus mode - Pomodoro engine, session history and tag learning."""

from .clock import Clock, SystemClock
from .engine import CompletionEvent, TimerEngine, TimerMode, TimerState
from .history import Session, SessionHistory, SessionType
from .tags import TagInfo, TagStore

__all__ = [
    "Clock",
    "SystemClock",
    "CompletionEvent",
    "TimerEngine",
    "TimerMode",
    "TimerState",
    "Session",
    "SessionHistory",
    "SessionType",
    "TagInfo",
    "TagStore",
]

"""Application configuration model and the editable settings list.

The config record tolerates schema drift: unknown keys are dropped, missing
keys take their defaults and out-of-range numbers are clamped rather than
rejected.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# (minimum, maximum) for every numeric setting
SETTING_RANGES: dict[str, tuple[int, int]] = {
    "work_duration_mins": (1, 120),
    "short_break_mins": (1, 60),
    "long_break_mins": (1, 60),
    "sessions_before_long_break": (1, 10),
    "daily_goal_pomodoros": (1, 20),
    "hide_hints_after_secs": (0, 10),
}

DEFAULT_MODES = ("pomodoro", "timer")


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class SettingsCategory(str, Enum):
    """Groups shown in the settings view."""

    TIMER = "TIMER"
    GOALS = "GOALS & STREAKS"
    APPEARANCE = "APPEARANCE"
    BEHAVIOR = "BEHAVIOR"
    NOTIFICATIONS = "NOTIFICATIONS"
    DANGER = "DANGER ZONE"


class SettingsField(str, Enum):
    """Editable settings in display order.

    Values are the AppConfig attribute names; ``reset_data`` is an action.
    """

    WORK_DURATION = "work_duration_mins"
    SHORT_BREAK = "short_break_mins"
    LONG_BREAK = "long_break_mins"
    SESSIONS_BEFORE_LONG = "sessions_before_long_break"
    DAILY_GOAL = "daily_goal_pomodoros"
    SHOW_STREAK = "show_streak"
    BREATHING_ANIMATION = "breathing_enabled"
    HIDE_HINTS_AFTER = "hide_hints_after_secs"
    AUTO_START_BREAKS = "auto_start_breaks"
    FOCUS_MODE_ON_START = "focus_mode_on_start"
    NOTIFICATIONS_ENABLED = "notifications_enabled"
    RESET_DATA = "reset_data"

    @property
    def category(self) -> SettingsCategory:
        return _FIELD_CATEGORIES[self]

    @property
    def label(self) -> str:
        return _FIELD_LABELS[self]

    @property
    def is_toggle(self) -> bool:
        return self.value not in SETTING_RANGES and self is not SettingsField.RESET_DATA

    def next(self) -> SettingsField:
        fields = list(SettingsField)
        return fields[(fields.index(self) + 1) % len(fields)]

    def prev(self) -> SettingsField:
        fields = list(SettingsField)
        return fields[(fields.index(self) - 1) % len(fields)]


_FIELD_CATEGORIES = {
    SettingsField.WORK_DURATION: SettingsCategory.TIMER,
    SettingsField.SHORT_BREAK: SettingsCategory.TIMER,
    SettingsField.LONG_BREAK: SettingsCategory.TIMER,
    SettingsField.SESSIONS_BEFORE_LONG: SettingsCategory.TIMER,
    SettingsField.DAILY_GOAL: SettingsCategory.GOALS,
    SettingsField.SHOW_STREAK: SettingsCategory.GOALS,
    SettingsField.BREATHING_ANIMATION: SettingsCategory.APPEARANCE,
    SettingsField.HIDE_HINTS_AFTER: SettingsCategory.APPEARANCE,
    SettingsField.AUTO_START_BREAKS: SettingsCategory.BEHAVIOR,
    SettingsField.FOCUS_MODE_ON_START: SettingsCategory.BEHAVIOR,
    SettingsField.NOTIFICATIONS_ENABLED: SettingsCategory.NOTIFICATIONS,
    SettingsField.RESET_DATA: SettingsCategory.DANGER,
}

_FIELD_LABELS = {
    SettingsField.WORK_DURATION: "Work duration (min)",
    SettingsField.SHORT_BREAK: "Short break (min)",
    SettingsField.LONG_BREAK: "Long break (min)",
    SettingsField.SESSIONS_BEFORE_LONG: "Sessions before long break",
    SettingsField.DAILY_GOAL: "Daily goal (pomodoros)",
    SettingsField.SHOW_STREAK: "Show streak",
    SettingsField.BREATHING_ANIMATION: "Breathing animation",
    SettingsField.HIDE_HINTS_AFTER: "Hide hints after (s)",
    SettingsField.AUTO_START_BREAKS: "Auto-start breaks",
    SettingsField.FOCUS_MODE_ON_START: "Focus mode on start",
    SettingsField.NOTIFICATIONS_ENABLED: "Notifications",
    SettingsField.RESET_DATA: "Reset all data",
}


class AppConfig(BaseModel):
    """Main pomo-cli configuration."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    # Timer durations
    work_duration_mins: int = Field(default=25)
    short_break_mins: int = Field(default=5)
    long_break_mins: int = Field(default=15)
    sessions_before_long_break: int = Field(default=4)

    # Mode
    default_mode: str = Field(default="pomodoro")
    auto_start_breaks: bool = Field(default=False)

    # Goals & streaks
    daily_goal_pomodoros: int = Field(default=8)
    show_streak: bool = Field(default=True)

    # Appearance
    breathing_enabled: bool = Field(default=False)
    hide_hints_after_secs: int = Field(default=3)
    theme: str = Field(default="dark")

    # Behavior
    focus_mode_on_start: bool = Field(default=False)

    # Notifications
    notifications_enabled: bool = Field(default=True)

    @field_validator(*SETTING_RANGES.keys(), mode="before")
    @classmethod
    def clamp_ranges(cls, v: Any, info) -> int:
        """Clamp numeric settings into their valid range.

        Values that are not numbers at all (null, lists, infinity) take the
        field default.
        """
        low, high = SETTING_RANGES[info.field_name]
        try:
            value = int(v)
        except (TypeError, ValueError, OverflowError):
            return cls.model_fields[info.field_name].default
        return clamp(value, low, high)

    @field_validator("default_mode", mode="before")
    @classmethod
    def validate_default_mode(cls, v: Any) -> str:
        value = str(v).strip().lower()
        return value if value in DEFAULT_MODES else "pomodoro"

    @property
    def work_duration_secs(self) -> int:
        return self.work_duration_mins * 60

    @property
    def short_break_secs(self) -> int:
        return self.short_break_mins * 60

    @property
    def long_break_secs(self) -> int:
        return self.long_break_mins * 60

    def adjust(self, field: SettingsField, delta: int) -> bool:
        """Apply a clamped change (numbers) or a flip (flags) to *field*.

        Returns True if the config changed. ``RESET_DATA`` is never applied
        here; the caller runs its confirmation flow instead.
        """
        if field is SettingsField.RESET_DATA:
            return False

        name = field.value
        old = getattr(self, name)
        if field.is_toggle:
            setattr(self, name, not old)
        else:
            setattr(self, name, old + delta)
        return getattr(self, name) != old

    def set_value(self, key: str, raw: str) -> Any:
        """Set *key* from a string typed on the command line.

        Raises:
            KeyError: If *key* is not a config field
            ValueError: If *raw* cannot be converted to the field's type
        """
        if key not in type(self).model_fields:
            raise KeyError(key)

        current = getattr(self, key)
        if isinstance(current, bool):
            lowered = raw.strip().lower()
            if lowered not in ("true", "false", "on", "off", "1", "0", "yes", "no"):
                raise ValueError(f"Expected a boolean for '{key}', got '{raw}'")
            value: Any = lowered in ("true", "on", "1", "yes")
        elif isinstance(current, int):
            value = int(raw)
        else:
            value = raw

        setattr(self, key, value)
        return getattr(self, key)

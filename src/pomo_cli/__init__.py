"""pomo-cli - a terminal Pomodoro timer with tasks, tags and streaks."""

__version__ = "0.1.0"

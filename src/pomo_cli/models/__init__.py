"""Data models for pomo-cli."""

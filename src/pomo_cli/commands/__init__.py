"""CLI commands for pomo-cli."""

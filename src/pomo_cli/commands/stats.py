"""Statistics and session history commands."""

import typer
from rich.table import Table

from pomo_cli.services.storage_service import get_storage_service
from pomo_cli.utils.console import get_console
from pomo_cli.utils.exit_codes import ERROR_INVALID_ARGS
from pomo_cli.utils.formatters import format_duration, format_info, format_output

from .decorators import AppError, command_wrapper

console = get_console()

CHART_WIDTH = 30


def collect_stats() -> dict:
    """Gather the dashboard numbers as plain data."""
    storage = get_storage_service()
    clock = storage.clock
    config = storage.load_config().value
    history = storage.load_history().value
    completed, goal = history.daily_goal_progress(config.daily_goal_pomodoros, clock)

    return {
        "today_pomodoros": completed,
        "daily_goal": goal,
        "today_focus_secs": history.today_focus_secs(clock),
        "week_focus_secs": history.week_focus_secs(clock),
        "total_focus_secs": history.total_focus_secs(),
        "total_work_sessions": history.total_work_sessions(),
        "current_streak": history.current_streak,
        "longest_streak": history.longest_streak,
        "last_7_days": [
            {"day": label, "focus_secs": secs}
            for label, secs in history.last_7_days_focus(clock)
        ],
    }


@command_wrapper
def show_stats(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show today's progress, streaks and the last 7 days."""
    stats = collect_stats()
    if json_output:
        format_output(stats, "json")
        return

    console.print(
        f"[bold]Today:[/bold] 🍅 {stats['today_pomodoros']}/{stats['daily_goal']}"
        f"  ({format_duration(stats['today_focus_secs'])})"
    )
    console.print(f"[bold]This week:[/bold] {format_duration(stats['week_focus_secs'])}")
    console.print(
        f"[bold]All time:[/bold] {format_duration(stats['total_focus_secs'])}"
        f" over {stats['total_work_sessions']} pomodoros"
    )
    console.print(
        f"[bold]Streak:[/bold] 🔥 {stats['current_streak']} day(s)"
        f" (best {stats['longest_streak']})"
    )
    console.print()

    days = stats["last_7_days"]
    peak = max((d["focus_secs"] for d in days), default=0) or 1
    chart = Table(title="Last 7 days", show_header=False, box=None)
    chart.add_column("Day", style="cyan")
    chart.add_column("Bar", style="green")
    chart.add_column("Time", justify="right")
    for day in days:
        bar = "█" * int(CHART_WIDTH * day["focus_secs"] / peak)
        chart.add_row(day["day"], bar, format_duration(day["focus_secs"]))
    console.print(chart)


@command_wrapper
def show_history(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of sessions to show"),
) -> None:
    """List the most recent sessions, newest first."""
    if limit < 1:
        raise AppError("--limit must be at least 1", exit_code=ERROR_INVALID_ARGS)

    history = get_storage_service().load_history().value
    sessions = history.recent_sessions(limit)
    if not sessions:
        format_info("No sessions recorded yet")
        return

    table = Table(title="Recent sessions", show_header=True, header_style="bold magenta")
    table.add_column("When")
    table.add_column("Type")
    table.add_column("Duration", justify="right")
    table.add_column("Task")
    table.add_column("Note")
    for session in sessions:
        table.add_row(
            session.timestamp.strftime("%Y-%m-%d %H:%M"),
            session.session_type.value.replace("_", " "),
            format_duration(session.duration_secs),
            session.task_name or "-",
            session.note or "",
        )
    console.print(table)

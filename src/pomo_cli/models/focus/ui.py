"""Full-screen rendering of the interactive focus app."""

from __future__ import annotations

from rich.align import Align
from rich.console import Group, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pomo_cli.models.config_models import SettingsField
from pomo_cli.models.focus.engine import TimerState
from pomo_cli.services.focus_service import ActivePane, CurrentView, FocusApp, InputMode
from pomo_cli.utils.formatters import format_duration

BAR_WIDTH = 40
CHART_WIDTH = 30

TIMER_HINTS = (
    "space start/pause • r reset • n skip • m mode • a add • / capture • "
    "f focus • 1/2/3 views • ? help • q quit"
)
NAV_HINTS = "1 timer • 2 dashboard • 3 settings • esc back • q quit"
SETTINGS_HINTS = "j/k select • h/l adjust • enter change • esc back • q quit"

HELP_TEXT = """[bold]Timer[/bold]
  space   start / pause        r   reset interval
  n       skip to next phase   m   pomodoro / timer mode
  f       focus mode           esc leave focus mode

[bold]Tasks[/bold]
  a       add task (#tags)     /   quick capture
  j / k   select               enter  toggle done
  d       delete               c   clear completed
  tab     switch pane

[bold]Views[/bold]
  1 timer   2 dashboard   3 settings   q quit

Press any key to close."""


# (base rgb, rgb added at full intensity) per timer state
BREATHING_RGB = {
    TimerState.WORK: ((0, 139, 139), (100, 80, 80)),
    TimerState.SHORT_BREAK: ((0, 128, 0), (50, 100, 50)),
    TimerState.LONG_BREAK: ((139, 0, 139), (80, 50, 80)),
}


def breathing_color(state: TimerState, intensity: float) -> str:
    """Rich colour for *state* brightened by *intensity* (0.0 to 1.0)."""
    base, span = BREATHING_RGB[state]
    r, g, b = (int(low + extra * intensity) for low, extra in zip(base, span))
    return f"rgb({r},{g},{b})"


def progress_bar(fraction: float, width: int = BAR_WIDTH) -> str:
    fraction = max(0.0, min(1.0, fraction))
    filled = int(width * fraction)
    return "▓" * filled + "░" * (width - filled)


class TimerDisplay:
    """Builds rich renderables for the current state of a FocusApp."""

    def __init__(self, app: FocusApp):
        self.app = app

    def render(self) -> RenderableType:
        app = self.app
        if app.show_help:
            return Panel(HELP_TEXT, title="Help", border_style="cyan")
        if app.current_view is CurrentView.DASHBOARD:
            body, hints = self._dashboard(), NAV_HINTS
        elif app.current_view is CurrentView.SETTINGS:
            body, hints = self._settings(), SETTINGS_HINTS
        else:
            body, hints = self._timer_view(), TIMER_HINTS

        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )
        layout["header"].update(Align.center(self._header(), vertical="middle"))
        layout["body"].update(body)
        footer = self._input_line() or (
            Text(hints, style="dim", justify="center")
            if app.hints_visible()
            else Text("")
        )
        layout["footer"].update(Align.center(footer, vertical="middle"))
        return layout

    # ------------------------------------------------------------------
    # Pieces
    # ------------------------------------------------------------------

    def _header(self) -> Text:
        app = self.app
        completed, goal = app.daily_goal_progress()
        header = Text(f"{app.greeting()}  ", style="bold")
        header.append(f"🍅 {completed}/{goal}", style="cyan")
        if app.config.show_streak and app.history.current_streak:
            header.append(f"   🔥 {app.history.current_streak}d", style="yellow")
        if app.is_late_night():
            header.append("   🌙 it's late", style="dim")
        return header

    def _input_line(self) -> Text | None:
        app = self.app
        if app.input_mode is InputMode.NORMAL:
            return None
        prompts = {
            InputMode.ADDING_TASK: "New task: ",
            InputMode.QUICK_CAPTURE: "Capture: ",
            InputMode.SESSION_NOTE: "Session note (enter save, space continue, esc skip): ",
            InputMode.CONFIRM_RESET: "Type DELETE to erase all data: ",
        }
        line = Text(prompts[app.input_mode], style="bold")
        line.append(app.input_buffer)
        line.append("▏", style="blink")
        if app.tag_suggestion:
            line.append(f"  ⇥ #{app.tag_suggestion}", style="dim")
        elif app.input_mode in (InputMode.ADDING_TASK, InputMode.QUICK_CAPTURE):
            recent = app.recent_tags()
            if recent:
                line.append("  " + " ".join(f"#{t}" for t in recent), style="dim")
        return line

    def _timer_panel(self) -> RenderableType:
        app = self.app
        engine = app.engine
        state_color = engine.state.color
        if app.is_breathing():
            state_color = color = breathing_color(engine.state, app.breathing_intensity())
        elif engine.is_paused:
            color = "yellow"
        else:
            color = state_color

        components: list[RenderableType] = [
            Text(engine.mode_display(), style=f"bold {state_color}", justify="center"),
            Text(""),
            Text(engine.formatted_time(), style=f"bold {color}", justify="center"),
            Text(""),
            Text(
                f"{progress_bar(engine.progress())}  {int(engine.progress() * 100)}%",
                style="dim",
                justify="center",
            ),
        ]
        if engine.mode.is_pomodoro:
            dots = " ".join(
                "⬤" if i < engine.session_count else "○"
                for i in range(engine.sessions_before_long)
            )
            components.append(Text(dots, justify="center"))
        if engine.is_paused:
            components.append(Text("PAUSED", style="yellow dim", justify="center"))
        else:
            components.append(
                Text(f"ends at {app.estimated_end_time()}", style="dim", justify="center")
            )
        if app.celebration:
            components.append(Text(""))
            components.append(
                Text(app.celebration.message, style="bold green", justify="center")
            )

        task = app.tasks.selected()
        if task is not None:
            components.insert(0, Text(task.name[:50], style="bold white", justify="center"))

        return Panel(
            Align.center(Group(*components), vertical="middle"),
            title="Timer",
            border_style=color,
        )

    def _task_panel(self) -> RenderableType:
        app = self.app
        table = Table(show_header=False, box=None, expand=True)
        table.add_column("", width=2)
        table.add_column("Task")
        table.add_column("", justify="right")

        for index, task in enumerate(app.tasks.tasks):
            marker = "›" if index == app.tasks.selected_index else " "
            name = Text(task.name, style="strike dim" if task.completed else "")
            if task.tags:
                name.append(" " + " ".join(f"#{t}" for t in task.tags), style="blue")
            table.add_row(marker, name, "🍅" * min(task.pomodoros_spent, 8))

        if not app.tasks.tasks:
            table.add_row("", Text("No tasks. Press 'a' to add one.", style="dim"), "")

        active = app.active_pane is ActivePane.TASKS
        return Panel(table, title="Tasks", border_style="cyan" if active else "dim")

    def _timer_view(self) -> RenderableType:
        if self.app.focus_mode:
            return self._timer_panel()
        layout = Layout()
        layout.split_row(
            Layout(self._task_panel(), name="tasks", ratio=2),
            Layout(self._timer_panel(), name="timer", ratio=3),
        )
        return layout

    def _dashboard(self) -> RenderableType:
        app = self.app
        history, clock = app.history, app.clock
        completed, goal = app.daily_goal_progress()

        cards = Table.grid(expand=True, padding=(0, 2))
        for _ in range(4):
            cards.add_column(justify="center")
        cards.add_row(
            f"[bold]Today[/bold]\n{format_duration(history.today_focus_secs(clock))}",
            f"[bold]Goal[/bold]\n{completed}/{goal}",
            f"[bold]Streak[/bold]\n{history.current_streak}d (best {history.longest_streak}d)",
            f"[bold]This week[/bold]\n{format_duration(history.week_focus_secs(clock))}",
        )

        days = history.last_7_days_focus(clock)
        peak = max((secs for _, secs in days), default=0) or 1
        chart = Table(show_header=False, box=None)
        chart.add_column("Day", style="cyan")
        chart.add_column("Bar")
        chart.add_column("Time", justify="right")
        for label, secs in days:
            chart.add_row(label, "█" * int(CHART_WIDTH * secs / peak), format_duration(secs))

        recent = Table(show_header=True, header_style="bold magenta", box=None)
        recent.add_column("When")
        recent.add_column("Type")
        recent.add_column("Task")
        recent.add_column("Note")
        for session in history.recent_sessions(8):
            recent.add_row(
                session.timestamp.strftime("%a %H:%M"),
                session.session_type.value.replace("_", " "),
                session.task_name or "-",
                session.note or "",
            )

        return Group(
            Panel(cards, title="Overview"),
            Panel(chart, title="Last 7 days"),
            Panel(recent, title="Recent sessions"),
        )

    def _settings(self) -> RenderableType:
        app = self.app
        table = Table(show_header=False, box=None)
        table.add_column("", width=2)
        table.add_column("Setting")
        table.add_column("Value", justify="right")

        category = None
        for field in SettingsField:
            if field.category is not category:
                category = field.category
                table.add_row("", Text(category.value, style="bold magenta"), "")
            marker = "›" if field is app.selected_setting else " "
            if field is SettingsField.RESET_DATA:
                value = "[red]enter[/red]"
            else:
                raw = getattr(app.config, field.value)
                value = ("on" if raw else "off") if field.is_toggle else str(raw)
            table.add_row(marker, field.label, value)

        return Panel(table, title="Settings")

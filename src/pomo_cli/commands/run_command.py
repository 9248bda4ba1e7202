"""Interactive full-screen Pomodoro timer."""

from rich.live import Live

from pomo_cli.commands.decorators import command_wrapper
from pomo_cli.models.focus.keyboard import create_keyboard_handler
from pomo_cli.models.focus.ui import TimerDisplay
from pomo_cli.services.focus_service import FocusApp
from pomo_cli.services.notification_service import ConsoleNotifier
from pomo_cli.services.storage_service import get_storage_service
from pomo_cli.utils.console import get_console
from pomo_cli.utils.logger import get_logger

console = get_console()

POLL_TIMEOUT = 0.1
REFRESH_PER_SECOND = 10


def run_loop(app: FocusApp, keyboard, live: Live) -> None:
    """Poll keys, tick and redraw until the app asks to quit."""
    display = TimerDisplay(app)
    while not app.should_quit:
        key = keyboard.get_key(timeout=POLL_TIMEOUT)
        if key is not None:
            app.handle_key(key)
        app.tick()
        live.update(display.render())


@command_wrapper
def run_focus() -> None:
    """Start the interactive timer."""
    logger = get_logger()
    app = FocusApp(get_storage_service(), notifier=ConsoleNotifier())
    keyboard = create_keyboard_handler()
    try:
        with Live(
            TimerDisplay(app).render(),
            console=console,
            refresh_per_second=REFRESH_PER_SECOND,
            screen=True,
        ) as live:
            run_loop(app, keyboard, live)
    except KeyboardInterrupt:
        logger.info("Interrupted, saving state")
    finally:
        keyboard.stop()
        app.save_all()

    completed, goal = app.daily_goal_progress()
    console.print(f"[bold]🍅 {completed}/{goal}[/bold] pomodoros today. See you soon!")

"""Main entry point for pomo-cli."""

import typer

from pomo_cli import __version__
from pomo_cli.commands import config, data, run_command, stats, tags, tasks
from pomo_cli.utils.console import get_console

app = typer.Typer(
    name="pomo",
    help="A Pomodoro focus timer for the terminal",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(tasks.app, name="tasks", help="Task list commands")
app.add_typer(tags.app, name="tags", help="Learned tag commands")
app.add_typer(config.app, name="config", help="Configuration management")
app.add_typer(data.app, name="data", help="Data management (reset)")

# Add top-level commands
app.command("run")(run_command.run_focus)
app.command("stats")(stats.show_stats)
app.command("history")(stats.show_history)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]pomo-cli[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

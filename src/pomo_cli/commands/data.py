"""Data management commands."""

import typer

from pomo_cli.services.storage_service import get_storage_service
from pomo_cli.utils.exit_codes import ERROR_STORAGE
from pomo_cli.utils.formatters import format_success, format_warning

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Data management commands")


@app.command("reset")
@command_wrapper
def reset_data(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Erase all sessions, tasks and learned tags. Settings are kept."""
    if not yes:
        format_warning("This permanently deletes your history, tasks and tags.")
        if not typer.confirm("Continue?"):
            raise typer.Exit(0)

    failed = [r for r in get_storage_service().reset_data() if not r.ok]
    if failed:
        paths = ", ".join(str(r.path) for r in failed)
        raise AppError(f"Could not reset {paths}", exit_code=ERROR_STORAGE)
    format_success("All data reset")

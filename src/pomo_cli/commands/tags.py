"""Learned tag commands."""

import typer

from pomo_cli.services.storage_service import get_storage_service
from pomo_cli.utils.console import get_console
from pomo_cli.utils.exit_codes import ERROR_NOT_FOUND
from pomo_cli.utils.formatters import format_info, format_output

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Learned tag commands")
console = get_console()


@app.command("list")
@command_wrapper
def list_tags(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List learned tags, most used first."""
    tags = get_storage_service().load_tags().value
    if not tags.tags and output == "table":
        format_info("No tags learned yet")
        return
    format_output(
        [
            {"name": t.name, "count": t.count, "last_used": t.last_used.isoformat()}
            for t in tags.tags
        ],
        output,
    )


@app.command("suggest")
@command_wrapper
def suggest_tag(
    partial: str = typer.Argument(..., help="Beginning or fragment of a tag"),
) -> None:
    """Print the best matching learned tag."""
    tags = get_storage_service().load_tags().value
    suggestion = tags.suggest(partial.lstrip("#"))
    if suggestion is None:
        raise AppError(f"No tag matches '{partial}'", exit_code=ERROR_NOT_FOUND)
    console.print(suggestion, markup=False, highlight=False)

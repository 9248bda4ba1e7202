"""Configuration management commands."""

import typer

from pomo_cli.models.config_models import AppConfig
from pomo_cli.services.storage_service import get_storage_service
from pomo_cli.utils.console import get_console
from pomo_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND, ERROR_STORAGE
from pomo_cli.utils.formatters import format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management commands")
console = get_console()


def _save(config: AppConfig) -> None:
    result = get_storage_service().save_config(config)
    if not result.ok:
        raise AppError(f"Could not save config: {result.error}", exit_code=ERROR_STORAGE)


@app.command("view")
@command_wrapper
def view_config(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    config = get_storage_service().load_config().value
    format_output(config.model_dump(), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., work_duration_mins)"),
) -> None:
    """Get a configuration value."""
    config = get_storage_service().load_config().value
    if key not in AppConfig.model_fields:
        raise AppError(f"Configuration key '{key}' not found", exit_code=ERROR_NOT_FOUND)
    console.print(str(getattr(config, key)), markup=False, highlight=False)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., work_duration_mins)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value. Numbers are clamped into their valid range."""
    config = get_storage_service().load_config().value
    try:
        stored = config.set_value(key, value)
    except KeyError:
        raise AppError(
            f"Configuration key '{key}' not found", exit_code=ERROR_NOT_FOUND
        ) from None
    except ValueError as e:
        raise AppError(
            f"Invalid value for '{key}': {value}", exit_code=ERROR_INVALID_ARGS
        ) from e
    _save(config)
    format_success(f"Configuration '{key}' set to '{stored}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration (or a single key) to defaults."""
    storage = get_storage_service()
    defaults = AppConfig()

    if key is None:
        if not yes and not typer.confirm("Reset all configuration to defaults?"):
            raise typer.Exit(0)
        _save(defaults)
        format_success("Configuration reset to defaults")
        return

    if key not in AppConfig.model_fields:
        raise AppError(f"Configuration key '{key}' not found", exit_code=ERROR_NOT_FOUND)
    config = storage.load_config().value
    setattr(config, key, getattr(defaults, key))
    _save(config)
    format_success(f"Configuration '{key}' reset to '{getattr(defaults, key)}'")

"""Task list commands."""

import typer

from pomo_cli.models.task import TaskList
from pomo_cli.services.storage_service import get_storage_service
from pomo_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND, ERROR_STORAGE
from pomo_cli.utils.formatters import format_info, format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Task list commands")


def _save(tasks: TaskList) -> None:
    result = get_storage_service().save_tasks(tasks)
    if not result.ok:
        raise AppError(f"Could not save tasks: {result.error}", exit_code=ERROR_STORAGE)


def _find(tasks: TaskList, task_id: str):
    task = tasks.find(task_id)
    if task is None:
        raise AppError(f"Task not found: {task_id}", exit_code=ERROR_NOT_FOUND)
    return task


@app.command("list")
@command_wrapper
def list_tasks(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
    all_tasks: bool = typer.Option(False, "--all", "-a", help="Include completed tasks"),
) -> None:
    """List tasks."""
    tasks = get_storage_service().load_tasks().value
    rows = [
        {
            "#": position,
            "id": task.id[:8],
            "name": task.name,
            "tags": task.tags,
            "pomodoros": task.pomodoros_spent,
            "done": task.completed,
        }
        for position, task in enumerate(tasks.tasks, start=1)
        if all_tasks or not task.completed
    ]
    if not rows and output == "table":
        format_info("No tasks. Add one with 'pomo tasks add'.")
        return
    format_output(rows, output)


@app.command("add")
@command_wrapper
def add_task(
    text: list[str] = typer.Argument(..., help="Task name, with optional #tags"),
) -> None:
    """Add a task. Words starting with '#' become tags."""
    storage = get_storage_service()
    tasks = storage.load_tasks().value
    task = tasks.add_from_input(" ".join(text), storage.clock)
    if task is None:
        raise AppError("Task name cannot be empty", exit_code=ERROR_INVALID_ARGS)

    if task.tags:
        tags = storage.load_tags().value
        tags.record_usage(task.tags, storage.clock.today())
        result = storage.save_tags(tags)
        if not result.ok:
            raise AppError(f"Could not save tags: {result.error}", exit_code=ERROR_STORAGE)
    _save(tasks)
    format_success(f"Added task {task.id[:8]}: {task.name}")


@app.command("done")
@command_wrapper
def complete_task(
    task_id: str = typer.Argument(..., help="Task position or id prefix"),
) -> None:
    """Toggle a task's completed flag."""
    tasks = get_storage_service().load_tasks().value
    task = _find(tasks, task_id)
    task.completed = not task.completed
    _save(tasks)
    state = "completed" if task.completed else "reopened"
    format_success(f"Task {state}: {task.name}")


@app.command("remove")
@command_wrapper
def remove_task(
    task_id: str = typer.Argument(..., help="Task position or id prefix"),
) -> None:
    """Delete a task."""
    tasks = get_storage_service().load_tasks().value
    task = _find(tasks, task_id)
    tasks.remove(task)
    _save(tasks)
    format_success(f"Removed task: {task.name}")


@app.command("clear")
@command_wrapper
def clear_completed() -> None:
    """Remove all completed tasks."""
    tasks = get_storage_service().load_tasks().value
    removed = tasks.clear_completed()
    _save(tasks)
    format_success(f"Cleared {removed} completed task(s)")

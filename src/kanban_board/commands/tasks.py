"""Task management commands."""

from typing import Any

import typer

from kanban_board.models.core import Task
from kanban_board.models.exceptions import ValidationError
from kanban_board.services.board_service import open_board
from kanban_board.utils import validation
from kanban_board.utils.id_utils import resolve_column_id, resolve_label_id, resolve_task_id
from kanban_board.utils.sanitization import sanitize_task_data
from kanban_board.utils.typer_helpers import SuggestingGroup
from kanban_board.utils.ui.formatters import (
    format_info,
    format_output,
    format_success,
    format_task_detail,
)

from .decorators import command_wrapper
from .options import output_format, output_option

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")


def _task_fields(
    title: str | None = None,
    details: str | None = None,
    priority: str | None = None,
    rating: float | None = None,
    status: str | None = None,
    due: str | None = None,
) -> dict[str, Any]:
    """Sanitize the provided options, rejecting values the sanitizer would drop."""
    raw: dict[str, Any] = {}
    for key, value in (
        ("title", title),
        ("details", details),
        ("priority", priority),
        ("rating", rating),
        ("status", status),
        ("dueDate", due),
    ):
        if value is not None:
            raw[key] = value

    fields = sanitize_task_data(raw)
    if priority is not None and "priority" not in fields:
        validation.validate_priority(priority)
    if status is not None and "status" not in fields and status != "":
        raise ValidationError("status", "must be one of: active, completed, archived")
    if title is not None and not fields.get("title"):
        raise ValidationError("title", "cannot be empty")
    if details == "":
        fields["details"] = ""
    if status == "":
        fields["status"] = ""
    return fields


def _show(task: Task, fmt: str) -> None:
    if fmt != "pretty":
        format_output(task.model_dump(mode="json", by_alias=True), fmt)


@app.command("add")
@command_wrapper
def add_task(
    column_ref: str = typer.Argument(..., help="Column id or unique prefix"),
    title: str = typer.Argument(..., help="Task title"),
    details: str | None = typer.Option(None, "--details", "-d", help="Longer description"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="Critical/High/Medium/Low"),
    rating: float | None = typer.Option(None, "--rating", "-r", help="Score from 0 to 10"),
    label: list[str] | None = typer.Option(None, "--label", "-l", help="Label id; repeatable"),
    status: str | None = typer.Option(None, "--status", help="active, completed or archived"),
    due: str | None = typer.Option(None, "--due", help="Due date, e.g. 2026-11-01"),
    starred: bool = typer.Option(False, "--star", help="Star the task"),
    output: str | None = output_option(),
) -> None:
    """Add a task at the bottom of a column."""
    fmt = output_format(output)
    fields = _task_fields(title, details, priority, rating, status, due)
    fields["starred"] = starred

    with open_board() as session:
        store = session.store
        column_id = resolve_column_id(store, column_ref)
        fields["labels"] = [resolve_label_id(store, ref) for ref in label or []]
        task = store.add_task(column_id, fields)

    format_success(f"Task created: {task.id}")
    _show(task, fmt)


@app.command("edit")
@command_wrapper
def edit_task(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    details: str | None = typer.Option(None, "--details", "-d", help="New description"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="Critical/High/Medium/Low"),
    rating: float | None = typer.Option(None, "--rating", "-r", help="Score from 0 to 10"),
    status: str | None = typer.Option(None, "--status", help="active, completed, archived or ''"),
    due: str | None = typer.Option(None, "--due", help="Due date, '' to clear"),
    output: str | None = output_option(),
) -> None:
    """Change fields of a task without moving it."""
    fmt = output_format(output)
    patch = _task_fields(title, details, priority, rating, status, due)
    if not patch:
        raise ValidationError("task", "no updates specified")

    with open_board() as session:
        task_id = resolve_task_id(session.store, task_ref)
        task = session.store.edit_task(task_id, patch)

    format_success(f"Task updated: {task.id}")
    _show(task, fmt)


@app.command("delete")
@command_wrapper
def delete_task(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    with open_board() as session:
        task_id = resolve_task_id(session.store, task_ref)
        if not yes and not typer.confirm(f"Delete task {task_id}?"):
            format_info("Cancelled")
            raise typer.Exit(0)
        session.store.delete_task(task_id)

    format_success(f"Task deleted: {task_id}")


@app.command("move")
@command_wrapper
def move_task(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    column_ref: str = typer.Argument(..., help="Target column id or unique prefix"),
    index: int | None = typer.Option(
        None, "--index", "-i", help="Position in the target column, 0 is the top"
    ),
) -> None:
    """Move a task to another column, or to another position in its column."""
    with open_board() as session:
        store = session.store
        task_id = resolve_task_id(store, task_ref)
        column_id = resolve_column_id(store, column_ref)
        store.move_task(task_id, column_id, index)
        position = [task.id for task in store.tasks_in(column_id)].index(task_id)

    format_success(f"Task {task_id} moved to {column_id} at position {position}")


def _set_starred(task_ref: str, starred: bool) -> Task:
    with open_board() as session:
        task_id = resolve_task_id(session.store, task_ref)
        return session.store.edit_task(task_id, {"starred": starred})


@app.command("star")
@command_wrapper
def star_task(task_ref: str = typer.Argument(..., help="Task id or unique prefix")) -> None:
    """Star a task."""
    task = _set_starred(task_ref, True)
    format_success(f"Task starred: {task.id}")


@app.command("unstar")
@command_wrapper
def unstar_task(task_ref: str = typer.Argument(..., help="Task id or unique prefix")) -> None:
    """Remove the star from a task."""
    task = _set_starred(task_ref, False)
    format_success(f"Task unstarred: {task.id}")


@app.command("show")
@command_wrapper
def show_task(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    output: str | None = output_option(),
) -> None:
    """Show every field of a task."""
    fmt = output_format(output)
    with open_board(persist=False) as session:
        store = session.store
        task_id = resolve_task_id(store, task_ref)
        task = store.get_task(task_id)
        column = store.get_column(store.column_of(task_id))
        labels = store.resolve_labels(task)

    if fmt == "pretty":
        format_task_detail(task, column, labels)
    else:
        format_output(
            {**task.model_dump(mode="json", by_alias=True), "column": column.id}, fmt
        )

"""Column management commands."""

import typer

from kanban_board.models.exceptions import ValidationError
from kanban_board.services.board_service import open_board
from kanban_board.utils.id_utils import resolve_column_id
from kanban_board.utils.sanitization import sanitize_column_data
from kanban_board.utils.typer_helpers import SuggestingGroup
from kanban_board.utils.ui.formatters import (
    format_columns,
    format_info,
    format_output,
    format_success,
)

from .decorators import command_wrapper
from .options import output_format, output_option

app = typer.Typer(cls=SuggestingGroup, help="Column management commands")


@app.command("list")
@command_wrapper
def list_columns(output: str | None = output_option()) -> None:
    """List columns in display order."""
    fmt = output_format(output)
    with open_board(persist=False) as session:
        store = session.store
        columns = store.columns
        counts = {column.id: store.task_count(column.id) for column in columns}

    if fmt == "pretty":
        format_columns(columns, counts)
    else:
        rows = [{**column.model_dump(), "tasks": counts[column.id]} for column in columns]
        format_output(rows, fmt)


@app.command("add")
@command_wrapper
def add_column(
    title: str = typer.Argument(..., help="Column title"),
    column_id: str | None = typer.Option(None, "--id", help="Explicit column id"),
    output: str | None = output_option(),
) -> None:
    """Add a column at the right end of the board."""
    fmt = output_format(output)
    data = sanitize_column_data({"title": title})
    with open_board() as session:
        column = session.store.add_column(data.get("title", ""), column_id=column_id)

    format_success(f"Column created: {column.id}")
    if fmt != "pretty":
        format_output(column.model_dump(), fmt)


@app.command("edit")
@command_wrapper
def edit_column(
    column_ref: str = typer.Argument(..., help="Column id or unique prefix"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    order: int | None = typer.Option(None, "--order", help="New position, 0 is leftmost"),
    output: str | None = output_option(),
) -> None:
    """Rename and/or reposition a column."""
    fmt = output_format(output)
    raw = {}
    if title is not None:
        raw["title"] = title
    if order is not None:
        raw["order"] = order
    if not raw:
        raise ValidationError("column", "no updates specified")
    patch = sanitize_column_data(raw)
    if title is not None and "title" not in patch:
        raise ValidationError("title", "cannot be empty")

    with open_board() as session:
        column_id = resolve_column_id(session.store, column_ref)
        column = session.store.edit_column(column_id, patch)

    format_success(f"Column updated: {column.id}")
    if fmt != "pretty":
        format_output(column.model_dump(), fmt)


@app.command("delete")
@command_wrapper
def delete_column(
    column_ref: str = typer.Argument(..., help="Column id or unique prefix"),
    cascade: bool = typer.Option(False, "--cascade", help="Delete the column's tasks too"),
    move_to: str | None = typer.Option(
        None, "--move-to", help="Move the column's tasks to this column first"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a column. Non-empty columns need --cascade or --move-to."""
    if cascade and move_to is not None:
        raise ValidationError("move_tasks_to", "cannot both cascade and relocate tasks")

    with open_board() as session:
        store = session.store
        column_id = resolve_column_id(store, column_ref)

        if move_to is not None:
            target_id = resolve_column_id(store, move_to)
            moved = store.delete_column_moving_tasks(column_id, target_id)
            format_success(f"Column deleted: {column_id} ({moved} task(s) moved to {target_id})")
            return

        if cascade:
            count = store.task_count(column_id)
            if count and not yes and not typer.confirm(
                f"Delete column {column_id} and its {count} task(s)?"
            ):
                format_info("Cancelled")
                raise typer.Exit(0)
            deleted = store.delete_column_with_tasks(column_id)
            format_success(f"Column deleted: {column_id} ({deleted} task(s) deleted)")
            return

        store.delete_column(column_id)
        format_success(f"Column deleted: {column_id}")

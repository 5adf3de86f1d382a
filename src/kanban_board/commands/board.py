"""Board overview, import and export commands."""

import json
from pathlib import Path

import typer

from kanban_board.models.core import Task
from kanban_board.models.exceptions import ValidationError
from kanban_board.services.board_service import open_board
from kanban_board.services.board_store import BoardStore
from kanban_board.utils.id_utils import resolve_label_id
from kanban_board.utils.typer_helpers import SuggestingGroup
from kanban_board.utils.ui.formatters import (
    format_board,
    format_info,
    format_output,
    format_success,
)

from .decorators import command_wrapper
from .options import output_format, output_option

app = typer.Typer(cls=SuggestingGroup, help="Board overview, import and export")


def task_rows(store: BoardStore, projection: dict[str, list[Task]]) -> list[dict]:
    """Flatten a projection into one table row per visible task."""
    titles = {column.id: column.title for column in store.columns}
    names = {label.id: label.name for label in store.labels}
    return [
        {
            "column": titles[column_id],
            "id": task.id,
            "title": task.title,
            "priority": task.priority,
            "rating": task.rating,
            "starred": task.starred,
            "labels": [names[label_id] for label_id in task.labels if label_id in names],
        }
        for column_id, tasks in projection.items()
        for task in tasks
    ]


@app.command("show")
@command_wrapper
def show_board(
    search: str = typer.Option("", "--search", "-s", help="Match title or details"),
    label: list[str] | None = typer.Option(
        None, "--label", "-l", help="Label id; repeat to match any of several"
    ),
    priority: str | None = typer.Option(None, "--priority", "-p", help="Exact priority"),
    sort: str | None = typer.Option(None, "--sort", help="Sort key, e.g. priority or date-asc"),
    output: str | None = output_option(),
) -> None:
    """Show the board, optionally filtered and sorted."""
    fmt = output_format(output)
    with open_board(persist=False) as session:
        store = session.store
        view = session.view()
        label_ids = [resolve_label_id(store, ref) for ref in label or []]
        view.set_filter(search=search, label=label_ids or None, priority=priority, sort=sort)
        projection = view.project()

        if fmt in ("json", "yaml"):
            data = {
                column_id: [task.model_dump(mode="json", by_alias=True) for task in tasks]
                for column_id, tasks in projection.items()
            }
            format_output(data, fmt)
        elif fmt == "table":
            format_output(task_rows(store, projection), fmt)
        else:
            format_board(store.columns, projection, store.labels, total=store.task_count())


@app.command("export")
@command_wrapper
def export_board(
    file: Path | None = typer.Option(None, "--file", "-f", help="Write to this file"),
) -> None:
    """Export the whole board as JSON."""
    with open_board(persist=False) as session:
        data = session.store.export_state()

    if file is None:
        format_output(data, "json")
        return
    file.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    format_success(f"Board exported to {file}")


@app.command("import")
@command_wrapper
def import_board(
    file: Path = typer.Argument(..., help="JSON file produced by 'kanban board export'"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Replace the current board with an exported one."""
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ValidationError("file", f"cannot read {file}: {e}") from e

    if not yes and not typer.confirm("Replace the current board with the imported one?"):
        format_info("Cancelled")
        raise typer.Exit(0)

    with open_board(load=False) as session:
        session.store.replace_state(data)
        store = session.store
        format_success(
            f"Imported {len(store.columns)} columns, {store.task_count()} tasks "
            f"and {len(store.labels)} labels"
        )


@app.command("reset")
@command_wrapper
def reset_board(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset the board to the default columns, deleting every task and label."""
    if not yes and not typer.confirm("Delete every task and label and restore default columns?"):
        format_info("Cancelled")
        raise typer.Exit(0)

    with open_board(load=False) as session:
        session.store.reset_state()
        titles = ", ".join(column.title for column in session.store.columns)
        format_success(f"Board reset: {titles}")

"""Label management commands."""

import typer

from kanban_board.models.exceptions import ValidationError
from kanban_board.services.board_service import open_board
from kanban_board.utils.id_utils import resolve_id, resolve_label_id, resolve_task_id
from kanban_board.utils.sanitization import sanitize_label_data
from kanban_board.utils.typer_helpers import SuggestingGroup
from kanban_board.utils.ui.formatters import (
    format_info,
    format_labels,
    format_output,
    format_success,
)

from .decorators import command_wrapper
from .options import output_format, output_option

app = typer.Typer(cls=SuggestingGroup, help="Label management commands")


def _label_fields(name: str | None, color: str | None) -> dict:
    raw = {}
    if name is not None:
        raw["name"] = name
    if color is not None:
        raw["color"] = color
    fields = sanitize_label_data(raw)
    if name is not None and not fields.get("name"):
        raise ValidationError("name", "cannot be empty")
    if color is not None and "color" not in fields:
        raise ValidationError("color", "must be a hex color like #FF0000 or #F00")
    return fields


@app.command("list")
@command_wrapper
def list_labels(
    search: str | None = typer.Option(None, "--search", help="Search label names"),
    output: str | None = output_option(),
) -> None:
    """List all labels."""
    fmt = output_format(output)
    with open_board(persist=False) as session:
        store = session.store
        labels = store.labels
        usage = {label.id: 0 for label in labels}
        for column in store.columns:
            for task in store.tasks_in(column.id):
                for label_id in task.labels:
                    if label_id in usage:
                        usage[label_id] += 1

    if search:
        search_lower = search.lower()
        labels = [label for label in labels if search_lower in label.name.lower()]

    if fmt == "pretty":
        format_labels(labels, usage)
    else:
        format_output([{**label.model_dump(), "tasks": usage[label.id]} for label in labels], fmt)


@app.command("create")
@command_wrapper
def create_label(
    name: str = typer.Argument(..., help="Label name"),
    color: str | None = typer.Option(None, "--color", help="Hex color, default #6B7280"),
    output: str | None = output_option(),
) -> None:
    """Create a new label."""
    fmt = output_format(output)
    fields = _label_fields(name, color)
    with open_board() as session:
        label = session.store.add_label(fields)

    format_success(f"Label created: {label.id}")
    if fmt != "pretty":
        format_output(label.model_dump(), fmt)


@app.command("update")
@command_wrapper
def update_label(
    label_ref: str = typer.Argument(..., help="Label id or unique prefix"),
    name: str | None = typer.Option(None, "--name", help="Label name"),
    color: str | None = typer.Option(None, "--color", help="Hex color"),
    output: str | None = output_option(),
) -> None:
    """Rename or recolor a label."""
    fmt = output_format(output)
    if name is None and color is None:
        raise ValidationError("label", "no updates specified")
    fields = _label_fields(name, color)

    with open_board() as session:
        label_id = resolve_label_id(session.store, label_ref)
        label = session.store.edit_label(label_id, fields)

    format_success(f"Label updated: {label.id}")
    if fmt != "pretty":
        format_output(label.model_dump(), fmt)


@app.command("delete")
@command_wrapper
def delete_label(
    label_ref: str = typer.Argument(..., help="Label id or unique prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a label and remove it from every task."""
    with open_board() as session:
        label_id = resolve_label_id(session.store, label_ref)
        if not yes and not typer.confirm(f"Are you sure you want to delete label {label_id}?"):
            format_info("Cancelled")
            raise typer.Exit(0)
        detached = session.store.delete_label(label_id)

    format_success(f"Label deleted: {label_id} (removed from {detached} task(s))")


@app.command("attach")
@command_wrapper
def attach_label(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    label_ref: str = typer.Argument(..., help="Label id or unique prefix"),
) -> None:
    """Attach a label to a task."""
    with open_board() as session:
        store = session.store
        task_id = resolve_task_id(store, task_ref)
        label_id = resolve_label_id(store, label_ref)
        store.attach_label(task_id, label_id)

    format_success(f"Label {label_id} attached to task {task_id}")


@app.command("detach")
@command_wrapper
def detach_label(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    label_ref: str = typer.Argument(..., help="Label id or unique prefix"),
) -> None:
    """Detach a label from a task (also works for ids of deleted labels)."""
    with open_board() as session:
        store = session.store
        task_id = resolve_task_id(store, task_ref)
        known = {label.id for label in store.labels} | set(store.get_task(task_id).labels)
        label_id = str(resolve_id(label_ref, sorted(known), "label"))
        store.detach_label(task_id, label_id)

    format_success(f"Label {label_id} detached from task {task_id}")

"""Output formatters for different formats."""

import json
from typing import Any

import yaml
from rich.columns import Columns
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from kanban_board.models.core import Column, Label, Task
from kanban_board.utils.ui.console import get_console

console = get_console()

OUTPUT_FORMATS = ("pretty", "table", "json", "yaml")


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    elif output_format == "yaml":
        print(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True),
            end="",
        )
    elif output_format == "table":
        format_table(data)
    else:
        format_pretty(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict):
            format_dict_table(data)
        else:
            for item in data:
                console.print(item)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None or value == "":
        return "-"
    return str(value)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())
    for item in items:
        table.add_row(*(Text(_cell(item.get(col))) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), Text(_cell(value)))

    console.print(table)


def format_pretty(data: Any) -> None:
    """Generic pretty output for records that have no dedicated renderer."""
    if isinstance(data, list):
        format_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {escape(message)}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {escape(message)}")


# ============================================================================
# Board rendering
# ============================================================================

PRIORITY_ICONS = {
    "Critical": "🔴",
    "High": "🟠",
    "Medium": "🟡",
    "Low": "🟢",
}

PRIORITY_COLORS = {
    "Critical": "bold #8b1538",
    "High": "bold #dc2626",
    "Medium": "#f97316",
    "Low": "#eab308",
}

STATUS_ICONS = {
    "": "⬜",
    "active": "▶️",
    "completed": "☑️",
    "archived": "🗃️",
}

STAR_ICON = "⭐"


def rich_color(color: str) -> str:
    """Expand #RGB shorthand, which rich cannot parse, to #RRGGBB."""
    if len(color) == 4:
        return "#" + "".join(ch * 2 for ch in color[1:])
    return color


def label_text(label: Label) -> Text:
    return Text(f"#{label.name}", style=f"bold {rich_color(label.color)}")


def task_card(task: Task, labels: list[Label]) -> Text:
    """One task rendered as a few lines of rich text."""
    card = Text()
    card.append(f"{PRIORITY_ICONS.get(task.priority, '')} ")
    if task.starred:
        card.append(f"{STAR_ICON} ")
    card.append(task.title, style="dim" if task.status == "completed" else "bold")
    card.append("\n")
    card.append(task.priority, style=PRIORITY_COLORS.get(task.priority, ""))
    if task.rating is not None:
        card.append(f" • {task.rating:g}/10", style="cyan")
    if task.due_date:
        card.append(f" • 📅 {task.due_date}", style="cyan")
    for label in labels:
        card.append(" ")
        card.append_text(label_text(label))
    card.append(f"\n{task.id}", style="dim")
    return card


def format_board(
    columns: list[Column],
    projection: dict[str, list[Task]],
    labels: list[Label],
    total: int | None = None,
) -> None:
    """Render the projected board as side-by-side column panels.

    Args:
        columns: Board columns in display order
        projection: Column id -> visible tasks
        labels: Every label record, used to color task labels
        total: Task count before filtering, shown when it differs from the visible count
    """
    by_id = {label.id: label for label in labels}
    panels = []
    for column in columns:
        tasks = projection.get(column.id, [])
        body = Text()
        for index, task in enumerate(tasks):
            if index:
                body.append("\n\n")
            resolved = [by_id[label_id] for label_id in task.labels if label_id in by_id]
            body.append_text(task_card(task, resolved))
        if not tasks:
            body.append("No tasks", style="dim italic")
        panels.append(
            Panel(
                body,
                title=Text.assemble((column.title, "bold"), f" ({len(tasks)})"),
                subtitle=Text(column.id, style="dim"),
                width=36,
            )
        )

    visible = sum(len(tasks) for tasks in projection.values())
    header = Text("📋 Board ", style="bold cyan")
    if total is not None and total != visible:
        header.append(f"({visible} of {total} tasks shown)", style="dim")
    else:
        header.append(f"({visible} tasks)", style="dim")
    console.print(header)
    console.print(Columns(panels))


def format_task_detail(task: Task, column: Column, labels: list[Label]) -> None:
    """Show every field of one task."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    title = Text(task.title, style="bold")
    if task.starred:
        title.append(f" {STAR_ICON}")
    table.add_row("Title", title)
    table.add_row("Id", str(task.id))
    table.add_row("Column", Text(f"{column.title} ({column.id})"))
    table.add_row(
        "Priority",
        Text(
            f"{PRIORITY_ICONS.get(task.priority, '')} {task.priority}",
            style=PRIORITY_COLORS.get(task.priority, ""),
        ),
    )
    table.add_row("Rating", "-" if task.rating is None else f"{task.rating:g}/10")
    table.add_row("Status", f"{STATUS_ICONS.get(task.status, '')} {task.status or 'open'}")
    table.add_row("Due", Text(task.due_date or "-"))
    table.add_row("Created", task.created_at.isoformat(timespec="seconds"))
    label_line = Text()
    for index, label in enumerate(labels):
        if index:
            label_line.append(" ")
        label_line.append_text(label_text(label))
    table.add_row("Labels", label_line if labels else "-")
    if task.details:
        table.add_row("Details", Text(task.details))

    console.print(table)


def format_labels(labels: list[Label], usage: dict[str, int] | None = None) -> None:
    """List labels with their colors and how many tasks carry them."""
    if not labels:
        console.print("[yellow]No labels found[/yellow]")
        return

    usage = usage or {}
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Id", style="dim")
    table.add_column("Name")
    table.add_column("Color")
    table.add_column("Tasks", justify="right")
    for label in labels:
        table.add_row(
            label.id,
            label_text(label),
            Text("■ ", style=rich_color(label.color)) + Text(label.color),
            str(usage.get(label.id, 0)),
        )

    console.print(table)


def format_columns(columns: list[Column], counts: dict[str, int]) -> None:
    """List columns in display order with their task counts."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Order", justify="right")
    table.add_column("Id", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Tasks", justify="right")
    for column in columns:
        table.add_row(
            str(column.order), column.id, Text(column.title), str(counts.get(column.id, 0))
        )

    console.print(table)

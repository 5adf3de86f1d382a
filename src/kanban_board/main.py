"""Main entry point for the kanban CLI."""

import locale

import typer

from kanban_board import __version__
from kanban_board.commands import auth, board, columns, config, labels, tasks
from kanban_board.services.config_service import get_config_service
from kanban_board.utils.logger import get_logger
from kanban_board.utils.typer_helpers import SuggestingGroup
from kanban_board.utils.ui.console import apply_color_setting, get_console

app = typer.Typer(
    name="kanban",
    cls=SuggestingGroup,
    help="A command-line kanban board with columns, tasks and labels",
    no_args_is_help=True,
)

console = get_console()


app.add_typer(board.app, name="board", help="Board overview, import and export")
app.add_typer(columns.app, name="columns", help="Column management commands")
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(labels.app, name="labels", help="Label management commands")
app.add_typer(auth.app, name="auth", help="Local account commands")
app.add_typer(config.app, name="config", help="Configuration management")


@app.callback()
def main() -> None:
    """Apply output and collation settings before any command runs."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        get_logger("main").debug("keeping default collation locale: %s", e)
    apply_color_setting(get_config_service().config.output.color)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Kanban board CLI[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
def show(
    search: str = typer.Option("", "--search", "-s", help="Match title or details"),
    label: list[str] | None = typer.Option(None, "--label", "-l", help="Label id; repeatable"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="Exact priority"),
    sort: str | None = typer.Option(None, "--sort", help="Sort key"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show the board (shortcut for 'kanban board show')."""
    board.show_board(search=search, label=label, priority=priority, sort=sort, output=output)


if __name__ == "__main__":
    app()

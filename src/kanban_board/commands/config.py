"""Configuration commands."""

import typer
import yaml
from pydantic import BaseModel

from kanban_board.services.config_service import get_config_service
from kanban_board.utils.typer_helpers import SuggestingGroup
from kanban_board.utils.ui.formatters import format_info, format_output, format_success

from .decorators import command_wrapper
from .options import output_format, output_option

app = typer.Typer(cls=SuggestingGroup, help="Configuration management")


def parse_value(raw: str):
    """Read a command-line value as YAML so numbers, booleans, null and lists work."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _plain(value):
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


@app.command("show")
@command_wrapper
def show_config(output: str | None = output_option()) -> None:
    """Show the whole configuration."""
    fmt = output_format(output)
    data = get_config_service().config.model_dump(mode="json")
    format_output(data, "yaml" if fmt == "pretty" else fmt)


@app.command("get")
@command_wrapper
def get_config(key: str = typer.Argument(..., help="Dotted key, e.g. output.format")) -> None:
    """Print one setting."""
    value = _plain(get_config_service().get(key))
    if isinstance(value, (dict, list)):
        format_output(value, "yaml")
    else:
        print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Dotted key, e.g. board.default_rating"),
    value: str = typer.Argument(..., help="New value (YAML syntax: 5, true, null, [a, b])"),
) -> None:
    """Change one setting."""
    stored = get_config_service().set(key, parse_value(value))
    format_success(f"{key} = {stored!r}")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Restore every setting to its default (this also logs you out)."""
    if not yes and not typer.confirm("Reset all settings to their defaults?"):
        format_info("Cancelled")
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset to defaults")

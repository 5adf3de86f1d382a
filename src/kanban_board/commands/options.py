"""Option helpers shared by the command modules."""

import typer

from kanban_board.models.exceptions import ValidationError
from kanban_board.services.config_service import get_config_service
from kanban_board.utils.ui.formatters import OUTPUT_FORMATS


def output_option() -> str | None:
    return typer.Option(
        None,
        "--output",
        "-o",
        help=f"Output format ({', '.join(OUTPUT_FORMATS)}); defaults to output.format",
    )


def output_format(value: str | None) -> str:
    """The requested format, or the configured default."""
    fmt = value or get_config_service().config.output.format
    if fmt not in OUTPUT_FORMATS:
        raise ValidationError("output", f"must be one of: {', '.join(OUTPUT_FORMATS)}")
    return fmt

"""Console utilities for the kanban CLI."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Get the shared Rich Console used by every command."""
    return Console(highlight=False)


def apply_color_setting(enabled: bool) -> None:
    """Turn colored output on or off for the shared console."""
    get_console().no_color = not enabled

"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
from collections.abc import Callable

import typer

from kanban_board.models.exceptions import (
    AuthError,
    NotFoundError,
    StateIntegrityViolation,
    ValidationError,
)
from kanban_board.utils import exit_codes
from kanban_board.utils.logger import get_logger
from kanban_board.utils.ui.formatters import format_error

# Expected failures: logged at INFO, reported with their own message.
_USER_ERRORS: tuple[tuple[type[Exception], int], ...] = (
    (ValidationError, exit_codes.ERROR_INVALID_ARGS),
    (AuthError, exit_codes.ERROR_AUTH_FAILURE),
    (NotFoundError, exit_codes.ERROR_NOT_FOUND),
)


def exit_code_for(error: Exception) -> int:
    """Map an exception to the exit code the CLI reports for it."""
    for error_type, code in _USER_ERRORS:
        if isinstance(error, error_type):
            return code
    return exit_codes.ERROR_GENERAL


def command_wrapper(func: Callable) -> Callable:
    """Wrap a command with timing logs, async support and error-to-exit-code mapping.

    Board sessions opened inside the command only persist when it returns
    normally, so every failure path below leaves saved state untouched.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger("cli")
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            if inspect.iscoroutinefunction(func):
                result = asyncio.run(func(*args, **kwargs))
            else:
                result = func(*args, **kwargs)

            logger.info("command completed: %s (%.3fs)", cmd, time.monotonic() - start)
            return result

        except typer.Exit:
            raise

        except (ValidationError, AuthError, NotFoundError) as e:
            code = exit_code_for(e)
            logger.info(
                "command rejected: %s (%.3fs) %s - %s",
                cmd, time.monotonic() - start, exit_codes.get_exit_code_name(code), e,
            )
            format_error(str(e))
            raise typer.Exit(code=code) from e

        except StateIntegrityViolation as e:
            logger.critical(
                "board integrity violation in %s (%.3fs)", cmd, time.monotonic() - start,
                exc_info=True,
            )
            format_error("Internal error: the board could not be updated safely.")
            raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

        except Exception as e:
            logger.error(
                "command failed: %s (%.3fs) - %s", cmd, time.monotonic() - start, e,
                exc_info=True,
            )
            format_error("An internal error occurred. See the log file for details.")
            raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

    return wrapper

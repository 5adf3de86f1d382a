"""
Exit codes for the kanban CLI.

Semantic exit codes let scripts tell bad input apart from missing records
and engine faults without parsing messages.
"""

# Success
SUCCESS = 0

# General error, including internal board integrity faults
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Authentication failure (unknown user, wrong password, etc.)
ERROR_AUTH_FAILURE = 3

# Column, task or label not found
ERROR_NOT_FOUND = 5


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_AUTH_FAILURE: "ERROR_AUTH_FAILURE",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
    }
    return code_names.get(code, f"UNKNOWN({code})")


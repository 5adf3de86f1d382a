"""Custom exceptions for the kanban board engine."""


class BoardError(Exception):
    """Base exception for all board errors."""


class ValidationError(BoardError):
    """Raised when a field is missing, out of range, or not an allowed value.

    Attributes:
        field: Name of the offending field
        message: Human-readable explanation, without the field prefix
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFoundError(BoardError):
    """Raised when an operation references a column, task or label that does not exist."""

    def __init__(self, kind: str, entity_id: object):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} {entity_id!r} not found")


class StateIntegrityViolation(BoardError):
    """Raised when an internal board invariant is broken (an engine bug, not bad input)."""


class AuthError(BoardError):
    """Raised when signup or login is rejected."""

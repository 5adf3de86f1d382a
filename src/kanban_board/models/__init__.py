"""Kanban board domain models.

This package contains the Pydantic models that represent the board entities
(columns, tasks, labels), the snapshot shape used for persistence, the view
filter specification, and the error types raised by the engine.
"""

from .auth_models import AuthState, AuthUser, UserRecord
from .config_models import AppConfig
from .core import (
    PRIORITIES,
    PRIORITY_RANK,
    SORT_KEYS,
    TASK_STATUSES,
    BoardSnapshot,
    Column,
    ColumnCreate,
    ColumnUpdate,
    Label,
    LabelCreate,
    LabelUpdate,
    Priority,
    SortKey,
    Task,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
)
from .exceptions import (
    AuthError,
    BoardError,
    NotFoundError,
    StateIntegrityViolation,
    ValidationError,
)

__all__ = [
    # Column models
    "Column",
    "ColumnCreate",
    "ColumnUpdate",
    # Task models
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    "Priority",
    "SortKey",
    "PRIORITIES",
    "PRIORITY_RANK",
    "SORT_KEYS",
    "TASK_STATUSES",
    # Label models
    "Label",
    "LabelCreate",
    "LabelUpdate",
    # Snapshot
    "BoardSnapshot",
    # Config
    "AppConfig",
    # Accounts
    "AuthState",
    "AuthUser",
    "UserRecord",
    # Errors
    "BoardError",
    "ValidationError",
    "NotFoundError",
    "StateIntegrityViolation",
    "AuthError",
]

"""Board data models."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

Priority = Literal["Critical", "High", "Medium", "Low"]
TaskStatus = Literal["", "active", "completed", "archived"]
SortKey = Literal[
    "date",
    "date-asc",
    "priority",
    "priority-asc",
    "title",
    "title-desc",
    "rating",
    "rating-asc",
]

PRIORITIES: tuple[str, ...] = get_args(Priority)
TASK_STATUSES: tuple[str, ...] = get_args(TaskStatus)
SORT_KEYS: tuple[str, ...] = get_args(SortKey)

# Sort rank, higher is more severe
PRIORITY_RANK: dict[str, int] = {"Critical": 4, "High": 3, "Medium": 2, "Low": 1}

HEX_COLOR_PATTERN = r"^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$"
DEFAULT_LABEL_COLOR = "#6B7280"

TASK_TITLE_MAX_LENGTH = 200
TASK_DETAILS_MAX_LENGTH = 2000
COLUMN_TITLE_MAX_LENGTH = 100
LABEL_NAME_MAX_LENGTH = 50

RATING_MIN = 0.0
RATING_MAX = 10.0


def utcnow() -> datetime:
    return datetime.now(UTC)


def _required_text(value: str, max_length: int) -> str:
    value = value.strip()
    if not value:
        raise ValueError("cannot be empty")
    if len(value) > max_length:
        raise ValueError(f"must be at most {max_length} characters")
    return value


def clamp_rating(value: float | None) -> float | None:
    """Clamp a rating into [0, 10]; None stays None (sorted as 0)."""
    if value is None:
        return None
    if math.isnan(value):
        raise ValueError("must be a number")
    return min(max(float(value), RATING_MIN), RATING_MAX)


def unique_label_ids(values: list[str]) -> list[str]:
    """Strip label ids, drop blanks and collapse duplicates keeping first occurrence."""
    seen: dict[str, None] = {}
    for value in values:
        value = str(value).strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _due_date_text(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return value


class Column(BaseModel):
    """A board column.

    Attributes:
        id: Immutable unique identifier
        title: Display title
        order: Display rank, distinct across columns
    """

    id: str
    title: str
    order: int = Field(default=0, ge=0)


class ColumnCreate(BaseModel):
    """Model for creating a new column."""

    title: str

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _required_text(v, COLUMN_TITLE_MAX_LENGTH)


class ColumnUpdate(BaseModel):
    """Model for updating a column. Only provided fields are applied."""

    title: str | None = None
    order: int | None = Field(default=None, ge=0)

    @field_validator("title")
    @classmethod
    def _title(cls, v: str | None) -> str | None:
        return None if v is None else _required_text(v, COLUMN_TITLE_MAX_LENGTH)


class Label(BaseModel):
    """Label model representing a colored tag.

    Attributes:
        id: Unique identifier for the label
        name: Label name, not required to be unique
        color: Hex color code (#RRGGBB or #RGB)
    """

    id: str
    name: str
    color: str = Field(default=DEFAULT_LABEL_COLOR, pattern=HEX_COLOR_PATTERN)


class LabelCreate(BaseModel):
    """Model for creating a new label."""

    name: str
    color: str = Field(default=DEFAULT_LABEL_COLOR, pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _required_text(v, LABEL_NAME_MAX_LENGTH)


class LabelUpdate(BaseModel):
    """Model for updating a label. Only provided fields are applied."""

    name: str | None = None
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return None if v is None else _required_text(v, LABEL_NAME_MAX_LENGTH)


class Task(BaseModel):
    """Task model representing a complete task entity.

    Column membership is not a field: a task belongs to whichever column's
    list holds it.

    Attributes:
        id: Unique identifier (legacy boards may carry integer ids)
        title: Short title
        details: Optional longer description
        priority: Severity class
        rating: Score in [0, 10], None when never rated
        labels: Ordered set of label ids
        starred: Whether the task is starred
        status: Free lifecycle marker ("", active, completed, archived)
        created_at: Creation timestamp (serialized as createdAt)
        due_date: Due date text or "" (serialized as dueDate)
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | int
    title: str
    details: str = ""
    priority: Priority = "Medium"
    rating: float | None = None
    labels: list[str] = Field(default_factory=list)
    starred: bool = False
    status: TaskStatus = ""
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    due_date: str = Field(default="", alias="dueDate")

    @field_validator("rating")
    @classmethod
    def _rating(cls, v: float | None) -> float | None:
        return clamp_rating(v)

    @field_validator("labels")
    @classmethod
    def _labels(cls, v: list[str]) -> list[str]:
        return unique_label_ids(v)

    @field_validator("created_at")
    @classmethod
    def _created_at(cls, v: datetime) -> datetime:
        return _as_aware(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: object) -> object:
        return _due_date_text(v)

    @field_validator("details", mode="before")
    @classmethod
    def _details(cls, v: object) -> object:
        return "" if v is None else v


class TaskCreate(BaseModel):
    """Model for creating a new task.

    Attributes left unset fall back to board defaults (priority, rating).
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str
    details: str = ""
    priority: Priority | None = None
    rating: float | None = None
    labels: list[str] = Field(default_factory=list)
    starred: bool = False
    status: TaskStatus = ""
    created_at: datetime | None = Field(default=None, alias="createdAt")
    due_date: str = Field(default="", alias="dueDate")

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _required_text(v, TASK_TITLE_MAX_LENGTH)

    @field_validator("details")
    @classmethod
    def _details(cls, v: str) -> str:
        if len(v) > TASK_DETAILS_MAX_LENGTH:
            raise ValueError(f"must be at most {TASK_DETAILS_MAX_LENGTH} characters")
        return v

    @field_validator("rating")
    @classmethod
    def _rating(cls, v: float | None) -> float | None:
        return clamp_rating(v)

    @field_validator("labels")
    @classmethod
    def _labels(cls, v: list[str]) -> list[str]:
        return unique_label_ids(v)

    @field_validator("created_at")
    @classmethod
    def _created_at(cls, v: datetime | None) -> datetime | None:
        return None if v is None else _as_aware(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: object) -> object:
        return _due_date_text(v)


class TaskUpdate(BaseModel):
    """Model for updating an existing task.

    All fields are optional - only provided fields will be updated.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    details: str | None = None
    priority: Priority | None = None
    rating: float | None = None
    labels: list[str] | None = None
    starred: bool | None = None
    status: TaskStatus | None = None
    due_date: str | None = Field(default=None, alias="dueDate")

    @field_validator("title")
    @classmethod
    def _title(cls, v: str | None) -> str | None:
        return None if v is None else _required_text(v, TASK_TITLE_MAX_LENGTH)

    @field_validator("details")
    @classmethod
    def _details(cls, v: str | None) -> str | None:
        if v is not None and len(v) > TASK_DETAILS_MAX_LENGTH:
            raise ValueError(f"must be at most {TASK_DETAILS_MAX_LENGTH} characters")
        return v

    @field_validator("rating")
    @classmethod
    def _rating(cls, v: float | None) -> float | None:
        return clamp_rating(v)

    @field_validator("labels")
    @classmethod
    def _labels(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else unique_label_ids(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: object) -> object:
        return _due_date_text(v)


class BoardSnapshot(BaseModel):
    """The whole normalized board state, JSON-serializable.

    Attributes:
        columns: Columns in display order
        tasks: Column id -> ordered task list
        labels: All label records
    """

    columns: list[Column] = Field(default_factory=list)
    tasks: dict[str, list[Task]] = Field(default_factory=dict)
    labels: list[Label] = Field(default_factory=list)


class TaskFilters(BaseModel):
    """Ephemeral view configuration applied by the projector.

    Attributes:
        search: Case-insensitive substring matched against title or details
        label: A single label id, or a list matched with OR semantics
        priority: Exact priority match
        sort: Sort key; None keeps stored order
    """

    model_config = ConfigDict(extra="forbid")

    search: str = ""
    label: str | list[str] | None = None
    priority: Priority | None = None
    sort: SortKey | None = None

    @field_validator("search", mode="before")
    @classmethod
    def _search(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("label")
    @classmethod
    def _label(cls, v: str | list[str] | None) -> str | list[str] | None:
        if isinstance(v, list):
            return unique_label_ids(v) or None
        if isinstance(v, str):
            return v.strip() or None
        return v

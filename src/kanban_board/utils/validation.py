"""Structural validation shared by every board mutation.

Callers are expected to sanitize input first, but the store treats every
field as untrusted: required fields, enum membership, numeric bounds and the
per-task label cap are checked again here. Failures surface as
:class:`~kanban_board.models.exceptions.ValidationError` with the offending
field name.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from kanban_board.models.core import (
    PRIORITIES,
    SORT_KEYS,
    BoardSnapshot,
    ColumnCreate,
    ColumnUpdate,
    LabelCreate,
    LabelUpdate,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
)
from kanban_board.models.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_PYDANTIC_PREFIXES = ("Value error, ", "Assertion failed, ")


def to_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Convert the first pydantic error into a field-level ValidationError."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "data"
    message = error.get("msg", "is invalid")
    for prefix in _PYDANTIC_PREFIXES:
        if message.startswith(prefix):
            message = message[len(prefix) :]
    return ValidationError(field, message)


def validate_model(model_cls: type[ModelT], data: Any) -> ModelT:
    """Validate *data* (a mapping or an instance) into *model_cls*."""
    if isinstance(data, model_cls):
        data = data.model_dump(by_alias=True)
    elif data is None:
        data = {}
    elif not isinstance(data, Mapping):
        raise ValidationError("data", f"expected a mapping, got {type(data).__name__}")
    try:
        return model_cls.model_validate(dict(data))
    except PydanticValidationError as e:
        raise to_validation_error(e) from e


def _reject_nulls(patch: Mapping[str, Any]) -> None:
    # Absent keys mean "leave unchanged"; an explicit null is never a valid value.
    for key, value in patch.items():
        if value is None:
            raise ValidationError(str(key), "cannot be null")


def _patch_fields(model_cls: type[BaseModel], patch: Any) -> dict[str, Any]:
    if isinstance(patch, BaseModel):
        patch = patch.model_dump(exclude_unset=True, by_alias=True)
    if patch is None:
        patch = {}
    if not isinstance(patch, Mapping):
        raise ValidationError("patch", f"expected a mapping, got {type(patch).__name__}")
    _reject_nulls(patch)
    model = validate_model(model_cls, patch)
    return model.model_dump(exclude_unset=True)


def validate_column_create(title: Any) -> ColumnCreate:
    if not isinstance(title, str):
        raise ValidationError("title", "must be a string")
    return validate_model(ColumnCreate, {"title": title})


def validate_column_update(patch: Any) -> dict[str, Any]:
    return _patch_fields(ColumnUpdate, patch)


def validate_task_create(data: Any) -> TaskCreate:
    return validate_model(TaskCreate, data)


def validate_task_update(patch: Any) -> dict[str, Any]:
    return _patch_fields(TaskUpdate, patch)


def validate_label_create(data: Any) -> LabelCreate:
    return validate_model(LabelCreate, data)


def validate_label_update(patch: Any) -> dict[str, Any]:
    return _patch_fields(LabelUpdate, patch)


def validate_filters(data: Any) -> TaskFilters:
    return validate_model(TaskFilters, data)


def validate_snapshot(data: Any) -> BoardSnapshot:
    return validate_model(BoardSnapshot, data)


def check_label_cap(labels: list[str], cap: int) -> None:
    """Reject a label set larger than the per-task cap."""
    if len(labels) > cap:
        raise ValidationError("labels", f"a task can carry at most {cap} labels")


def validate_priority(value: Any) -> str:
    if value not in PRIORITIES:
        raise ValidationError("priority", f"must be one of: {', '.join(PRIORITIES)}")
    return value


def validate_sort_key(value: Any) -> str:
    if value not in SORT_KEYS:
        raise ValidationError("sort", f"must be one of: {', '.join(SORT_KEYS)}")
    return value


def validate_target_index(value: Any) -> int | None:
    """Accept None (append) or a non-negative integer position."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("target_index", "must be an integer")
    if value < 0:
        raise ValidationError("target_index", "cannot be negative")
    return value

"""Tests for the shared structural validation helpers."""

from __future__ import annotations

import pytest

from kanban_board.models.core import TaskCreate
from kanban_board.models.exceptions import ValidationError
from kanban_board.utils import validation


def test_task_create_error_names_the_field():
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_task_create({"title": "ok", "priority": "Urgent"})

    assert exc_info.value.field == "priority"


def test_task_create_missing_title():
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_task_create({})

    assert exc_info.value.field == "title"


def test_value_error_prefix_is_stripped():
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_task_create({"title": "  "})

    assert exc_info.value.message == "cannot be empty"


def test_validate_model_accepts_instances():
    data = TaskCreate(title="Ship it", rating=3)
    assert validation.validate_task_create(data).rating == 3


def test_validate_model_rejects_non_mappings():
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_task_create(["title"])

    assert exc_info.value.field == "data"


def test_task_update_returns_only_provided_fields():
    assert validation.validate_task_update({"priority": "High"}) == {"priority": "High"}


def test_task_update_rejects_explicit_null():
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_task_update({"priority": None})

    assert exc_info.value.field == "priority"


def test_task_update_accepts_camel_case_due_date():
    assert validation.validate_task_update({"dueDate": "2026-01-01"}) == {
        "due_date": "2026-01-01"
    }


def test_column_update_rejects_negative_order():
    with pytest.raises(ValidationError):
        validation.validate_column_update({"order": -1})


def test_column_create_requires_string():
    with pytest.raises(ValidationError):
        validation.validate_column_create(None)


def test_label_update_rejects_bad_color():
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_label_update({"color": "blue"})

    assert exc_info.value.field == "color"


def test_filters_reject_unknown_sort():
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_filters({"sort": "newest"})

    assert exc_info.value.field == "sort"


def test_check_label_cap():
    validation.check_label_cap([str(i) for i in range(10)], 10)
    with pytest.raises(ValidationError):
        validation.check_label_cap([str(i) for i in range(11)], 10)


@pytest.mark.parametrize("value", [None, 0, 5])
def test_target_index_accepts(value):
    assert validation.validate_target_index(value) == value


@pytest.mark.parametrize("value", [-1, True, "2", 1.5])
def test_target_index_rejects(value):
    with pytest.raises(ValidationError):
        validation.validate_target_index(value)


def test_priority_and_sort_enum_checks():
    assert validation.validate_priority("Low") == "Low"
    assert validation.validate_sort_key("title-desc") == "title-desc"
    with pytest.raises(ValidationError):
        validation.validate_priority("low")

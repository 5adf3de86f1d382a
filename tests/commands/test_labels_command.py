"""Tests for label management commands."""

import json

import pytest

from kanban_board.utils import exit_codes


@pytest.fixture()
def label_id(invoke, created_id):
    return created_id(invoke("labels", "create", "bug", "--color", "#FF0000").output)


@pytest.fixture()
def task_id(invoke, created_id):
    return created_id(invoke("tasks", "add", "todo", "Fix crash").output)


class TestCreateAndList:
    def test_create_with_default_color(self, invoke, created_id, saved_board):
        result = invoke("labels", "create", "ui")

        assert result.exit_code == 0, result.output
        assert saved_board().get_label(created_id(result.output)).color == "#6B7280"

    def test_create_rejects_bad_color(self, invoke, saved_board):
        result = invoke("labels", "create", "ui", "--color", "red")
        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS
        assert saved_board().labels == []

    def test_list_counts_usage(self, invoke, label_id, task_id):
        invoke("labels", "attach", task_id, label_id)

        data = json.loads(invoke("labels", "list", "-o", "json").output)

        assert data == [{"id": label_id, "name": "bug", "color": "#FF0000", "tasks": 1}]

    def test_list_search(self, invoke, label_id):
        invoke("labels", "create", "docs")
        data = json.loads(invoke("labels", "list", "--search", "BU", "-o", "json").output)
        assert [label["name"] for label in data] == ["bug"]

    def test_list_empty(self, invoke):
        assert "No labels found" in invoke("labels", "list").output


class TestUpdateAndDelete:
    def test_update(self, invoke, label_id, saved_board):
        result = invoke("labels", "update", label_id, "--name", "defect", "--color", "#0F0")

        assert result.exit_code == 0, result.output
        label = saved_board().get_label(label_id)
        assert (label.name, label.color) == ("defect", "#0F0")

    def test_update_needs_changes(self, invoke, label_id):
        result = invoke("labels", "update", label_id)
        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS

    def test_delete_detaches_from_tasks(self, invoke, label_id, task_id, saved_board):
        invoke("labels", "attach", task_id, label_id)

        result = invoke("labels", "delete", label_id, "--yes")

        assert "removed from 1 task(s)" in result.output
        store = saved_board()
        assert store.labels == []
        assert store.get_task(task_id).labels == []

    def test_delete_unknown(self, invoke):
        result = invoke("labels", "delete", "lbl-missing", "--yes")
        assert result.exit_code == exit_codes.ERROR_NOT_FOUND


class TestAttachDetach:
    def test_attach_twice_is_harmless(self, invoke, label_id, task_id, saved_board):
        invoke("labels", "attach", task_id, label_id)
        result = invoke("labels", "attach", task_id, label_id)

        assert result.exit_code == 0
        assert saved_board().get_task(task_id).labels == [label_id]

    def test_detach(self, invoke, label_id, task_id, saved_board):
        invoke("labels", "attach", task_id, label_id)
        result = invoke("labels", "detach", task_id, label_id)

        assert result.exit_code == 0, result.output
        assert saved_board().get_task(task_id).labels == []

    def test_detach_not_attached_is_harmless(self, invoke, label_id, task_id):
        assert invoke("labels", "detach", task_id, label_id).exit_code == 0

    def test_attach_unknown_task(self, invoke, label_id):
        result = invoke("labels", "attach", "task-000000000000", label_id)
        assert result.exit_code == exit_codes.ERROR_NOT_FOUND

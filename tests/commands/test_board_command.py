"""Tests for the board show/export/import/reset commands."""

import json

from kanban_board.utils import exit_codes


def seed_backlog(invoke, created_id):
    invoke("columns", "add", "Backlog", "--id", "backlog")
    t1 = created_id(invoke("tasks", "add", "backlog", "T1", "--priority", "Low").output)
    t2 = created_id(invoke("tasks", "add", "backlog", "T2", "--priority", "Critical").output)
    return t1, t2


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


class TestShow:
    def test_empty_board_pretty(self, invoke):
        result = invoke("board", "show")
        assert result.exit_code == 0, result.output
        assert "To Do (0)" in result.output
        assert "In Progress" in result.output

    def test_sort_only_changes_the_view(self, invoke, created_id, saved_board):
        t1, t2 = seed_backlog(invoke, created_id)

        result = invoke("board", "show", "--sort", "priority", "-o", "json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [task["id"] for task in data["backlog"]] == [t2, t1]
        assert [task.id for task in saved_board().tasks_in("backlog")] == [t1, t2]

    def test_filters(self, invoke, created_id):
        seed_backlog(invoke, created_id)

        result = invoke("board", "show", "--priority", "Low", "--search", "t", "-o", "json")

        data = json.loads(result.output)
        assert [task["title"] for task in data["backlog"]] == ["T1"]
        assert data["todo"] == []

    def test_label_filter_resolves_prefix(self, invoke, created_id):
        label_id = created_id(invoke("labels", "create", "bug").output)
        invoke("tasks", "add", "todo", "Tagged", "--label", label_id)
        invoke("tasks", "add", "todo", "Plain")

        result = invoke("board", "show", "--label", label_id[:8], "-o", "json")

        assert [task["title"] for task in json.loads(result.output)["todo"]] == ["Tagged"]

    def test_table_output(self, invoke, created_id):
        seed_backlog(invoke, created_id)
        result = invoke("board", "show", "-o", "table")
        assert result.exit_code == 0
        assert "Backlog" in result.output
        assert "Critical" in result.output

    def test_pretty_reports_filtered_count(self, invoke, created_id):
        seed_backlog(invoke, created_id)
        result = invoke("board", "show", "-p", "Critical")
        assert "1 of 2 tasks shown" in result.output

    def test_invalid_sort(self, invoke):
        result = invoke("board", "show", "--sort", "random")
        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS
        assert "sort" in result.output

    def test_invalid_output_format(self, invoke):
        result = invoke("board", "show", "-o", "xml")
        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS

    def test_top_level_shortcut(self, invoke, created_id):
        seed_backlog(invoke, created_id)
        result = invoke("show", "-o", "json")
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)["backlog"]) == 2


# ---------------------------------------------------------------------------
# export / import / reset
# ---------------------------------------------------------------------------


class TestExportImport:
    def test_export_to_stdout(self, invoke, created_id):
        seed_backlog(invoke, created_id)

        data = json.loads(invoke("board", "export").output)

        assert [c["id"] for c in data["columns"]][-1] == "backlog"
        assert "createdAt" in data["tasks"]["backlog"][0]

    def test_export_then_import_restores_board(self, invoke, created_id, saved_board, tmp_path):
        seed_backlog(invoke, created_id)
        path = tmp_path / "board.json"
        assert invoke("board", "export", "--file", str(path)).exit_code == 0
        exported = json.loads(path.read_text(encoding="utf-8"))

        invoke("board", "reset", "--yes")
        assert saved_board().task_count() == 0

        result = invoke("board", "import", str(path), "--yes")

        assert result.exit_code == 0, result.output
        assert "Imported 4 columns, 2 tasks and 0 labels" in result.output
        assert saved_board().export_state() == exported

    def test_import_rejects_malformed_board(self, invoke, created_id, saved_board, tmp_path):
        seed_backlog(invoke, created_id)
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"columns": [{"id": "a", "title": "A"}], "tasks": {"b": []}}))

        result = invoke("board", "import", str(path), "--yes")

        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS
        assert saved_board().task_count("backlog") == 2

    def test_import_unreadable_file(self, invoke, tmp_path):
        path = tmp_path / "nope.json"
        path.write_text("{oops")
        result = invoke("board", "import", str(path), "--yes")
        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS
        assert "cannot read" in result.output

    def test_import_cancelled(self, invoke, created_id, saved_board, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"columns": []}))
        seed_backlog(invoke, created_id)

        result = invoke("board", "import", str(path), input="n\n")

        assert "Cancelled" in result.output
        assert saved_board().task_count() == 2

    def test_reset(self, invoke, created_id, saved_board):
        seed_backlog(invoke, created_id)

        result = invoke("board", "reset", "--yes")

        assert "Board reset: To Do, In Progress, Done" in result.output
        store = saved_board()
        assert [c.id for c in store.columns] == ["todo", "in-progress", "done"]
        assert store.task_count() == 0

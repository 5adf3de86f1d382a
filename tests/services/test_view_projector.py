"""Tests for the view projector and BoardView."""

from datetime import UTC, datetime, timedelta

import pytest

from kanban_board.models.core import BoardSnapshot, Column, Task, TaskFilters
from kanban_board.models.exceptions import ValidationError
from kanban_board.services.board_store import BoardStore
from kanban_board.services.view_projector import (
    BoardView,
    matches_label,
    matches_search,
    project_board,
    project_column,
    sort_tasks,
)

BASE = datetime(2024, 1, 1, tzinfo=UTC)


def make_task(task_id, **fields):
    fields.setdefault("title", task_id)
    fields.setdefault("created_at", BASE)
    return Task(id=task_id, **fields)


def ids(tasks):
    return [task.id for task in tasks]


@pytest.fixture()
def tasks():
    return [
        make_task("a", title="Write docs", priority="Low", rating=3, labels=["bug"],
                  created_at=BASE),
        make_task("b", title="Fix login", details="crash on submit", priority="Critical",
                  rating=9, labels=["ui"], created_at=BASE + timedelta(days=2)),
        make_task("c", title="apple pie", priority="Medium", rating=None,
                  created_at=BASE + timedelta(days=1)),
        make_task("d", title="Deploy", priority="Critical", rating=5, labels=["bug", "ui"],
                  created_at=BASE + timedelta(days=3)),
    ]


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def test_matches_search_is_case_insensitive_over_title_and_details(tasks):
    assert matches_search(tasks[1], "LOGIN")
    assert matches_search(tasks[1], "Crash")
    assert not matches_search(tasks[0], "crash")


def test_matches_label_single_and_list(tasks):
    assert matches_label(tasks[0], "bug")
    assert not matches_label(tasks[0], "ui")
    assert matches_label(tasks[0], ["ui", "bug"])
    assert not matches_label(tasks[2], ["ui", "bug"])


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("sort", "expected"),
    [
        (None, ["a", "b", "c", "d"]),
        ("date", ["d", "b", "c", "a"]),
        ("date-asc", ["a", "c", "b", "d"]),
        ("priority", ["b", "d", "c", "a"]),
        ("priority-asc", ["a", "c", "b", "d"]),
        ("title", ["c", "d", "b", "a"]),
        ("title-desc", ["a", "b", "d", "c"]),
        ("rating", ["b", "d", "a", "c"]),
        ("rating-asc", ["c", "a", "d", "b"]),
    ],
)
def test_sort_keys(tasks, sort, expected):
    assert ids(sort_tasks(tasks, sort)) == expected


def test_title_sort_places_accented_titles_by_base_letter():
    titled = [make_task("z", title="zebra"), make_task("e", title="Éclair"),
              make_task("a", title="apple")]

    assert ids(sort_tasks(titled, "title")) == ["a", "e", "z"]
    assert ids(sort_tasks(titled, "title-desc")) == ["z", "e", "a"]


def test_board_view_title_sort_with_accents():
    store = BoardStore()
    for title in ("zebra", "Éclair", "apple"):
        store.add_task("todo", {"title": title})
    view = BoardView(store)

    view.set_sort("title")

    assert [task.title for task in view.project()["todo"]] == ["apple", "Éclair", "zebra"]


def test_sort_is_stable_for_ties():
    tied = [make_task(str(i), priority="High") for i in range(6)]
    assert ids(sort_tasks(tied, "priority")) == ids(tied)
    assert ids(sort_tasks(tied, "priority-asc")) == ids(tied)
    assert ids(sort_tasks(tied, "date")) == ids(tied)


def test_sort_rejects_unknown_key(tasks):
    with pytest.raises(ValidationError):
        sort_tasks(tasks, "random")


def test_sort_returns_new_list(tasks):
    result = sort_tasks(tasks, None)
    result.reverse()
    assert ids(tasks) == ["a", "b", "c", "d"]


# ---------------------------------------------------------------------------
# Filter pipeline
# ---------------------------------------------------------------------------


def test_empty_filters_keep_everything_in_order(tasks):
    assert ids(project_column(tasks)) == ["a", "b", "c", "d"]


def test_filters_compose(tasks):
    filters = TaskFilters(label=["bug", "ui"], priority="Critical", sort="date-asc")
    assert ids(project_column(tasks, filters)) == ["b", "d"]


def test_search_and_label_compose(tasks):
    filters = TaskFilters(search="e", label="bug")
    assert ids(project_column(tasks, filters)) == ["a", "d"]


def test_projection_does_not_alias_input(tasks):
    projected = project_column(tasks)
    projected[0].title = "changed"
    assert tasks[0].title == "Write docs"


def test_project_board_orders_columns_by_rank():
    snapshot = BoardSnapshot(
        columns=[Column(id="late", title="Late", order=1), Column(id="early", title="Early")],
        tasks={"early": [make_task("x")]},
    )
    projection = project_board(snapshot)
    assert list(projection) == ["early", "late"]
    assert projection["late"] == []


# ---------------------------------------------------------------------------
# BoardView
# ---------------------------------------------------------------------------


@pytest.fixture()
def backlog_store():
    store = BoardStore()
    store.add_column("Backlog", column_id="backlog")
    t1 = store.add_task("backlog", {"title": "T1", "priority": "Low"})
    t2 = store.add_task("backlog", {"title": "T2", "priority": "Critical"})
    return store, t1, t2


def test_sort_by_priority_projects_without_touching_stored_order(backlog_store):
    store, t1, t2 = backlog_store
    store.move_task(t1.id, "backlog", 0)

    view = BoardView(store)
    view.set_sort("priority")

    assert ids(view.project()["backlog"]) == [t2.id, t1.id]
    assert ids(store.tasks_in("backlog")) == [t1.id, t2.id]


def test_set_filter_merges(backlog_store):
    store, _, t2 = backlog_store
    view = BoardView(store)

    view.set_filter(search="t")
    view.set_filter({"priority": "Critical"})

    assert view.filters.search == "t"
    assert ids(view.project()["backlog"]) == [t2.id]
    assert view.visible_count() == 1


def test_invalid_filter_leaves_filters_unchanged(backlog_store):
    view = BoardView(backlog_store[0])
    view.set_filter(search="T1", sort="title")

    with pytest.raises(ValidationError):
        view.set_filter(priority="Urgent")
    with pytest.raises(ValidationError):
        view.set_filter(colour="red")
    with pytest.raises(ValidationError):
        view.set_sort("random")

    assert view.filters == TaskFilters(search="T1", sort="title")


def test_reset_filters(backlog_store):
    view = BoardView(backlog_store[0], {"priority": "Low"})
    assert view.visible_count() == 1

    view.reset_filters()

    assert view.filters == TaskFilters()
    assert view.visible_count() == 2


def test_view_reflects_later_store_changes(backlog_store):
    store, t1, _ = backlog_store
    view = BoardView(store, {"priority": "Low"})

    store.edit_task(t1.id, {"priority": "High"})

    assert view.visible_count() == 0

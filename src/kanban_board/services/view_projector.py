"""View projection - filtered and sorted per-column task lists.

Projection never touches the store: it reads a snapshot (already an
independent copy) and returns new lists, so callers may reorder or modify
the result freely.

Stages, applied per column in this order, each a no-op when its filter
field is unset:

1. search   - case-insensitive substring of ``title`` or ``details``
2. label    - single id membership, or OR across a list of ids
3. priority - exact match
4. sort     - one stable comparator from ``TaskFilters.sort``
"""

from __future__ import annotations

import locale
import unicodedata
from collections.abc import Callable, Iterable
from typing import Any

from kanban_board.models.core import PRIORITY_RANK, BoardSnapshot, Task, TaskFilters
from kanban_board.services.board_store import BoardStore
from kanban_board.utils import validation


def title_key(task: Task) -> tuple[str, str]:
    """Collation key for titles: accents folded, then the raw title as a tiebreak.

    Folding keeps accented titles next to their base letters even under the
    "C" collation locale, where ``strxfrm`` is the identity.
    """
    decomposed = unicodedata.normalize("NFKD", task.title)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return locale.strxfrm(folded), task.title


# sort key -> (key function, descending)
_SORTS: dict[str, tuple[Callable[[Task], Any], bool]] = {
    "date": (lambda task: task.created_at, True),
    "date-asc": (lambda task: task.created_at, False),
    "priority": (lambda task: PRIORITY_RANK.get(task.priority, 0), True),
    "priority-asc": (lambda task: PRIORITY_RANK.get(task.priority, 0), False),
    "title": (title_key, False),
    "title-desc": (title_key, True),
    "rating": (lambda task: task.rating or 0.0, True),
    "rating-asc": (lambda task: task.rating or 0.0, False),
}


def matches_search(task: Task, search: str) -> bool:
    term = search.lower()
    return term in task.title.lower() or term in (task.details or "").lower()


def matches_label(task: Task, label: str | list[str]) -> bool:
    if isinstance(label, list):
        return any(label_id in task.labels for label_id in label)
    return label in task.labels


def sort_tasks(tasks: Iterable[Task], sort: str | None) -> list[Task]:
    """Return a new list ordered by *sort*; equal keys keep their relative order."""
    tasks = list(tasks)
    if sort is None:
        return tasks
    key, descending = _SORTS[validation.validate_sort_key(sort)]
    # list.sort stays stable with reverse=True, so ties keep input order.
    tasks.sort(key=key, reverse=descending)
    return tasks


def project_column(tasks: Iterable[Task], filters: TaskFilters | None = None) -> list[Task]:
    """Apply the filter pipeline to one column's tasks."""
    filters = filters or TaskFilters()
    visible = [task.model_copy(deep=True) for task in tasks]

    if filters.search:
        visible = [task for task in visible if matches_search(task, filters.search)]
    if filters.label:
        visible = [task for task in visible if matches_label(task, filters.label)]
    if filters.priority:
        visible = [task for task in visible if task.priority == filters.priority]

    return sort_tasks(visible, filters.sort)


def project_board(
    snapshot: BoardSnapshot, filters: TaskFilters | None = None
) -> dict[str, list[Task]]:
    """Project every column of a snapshot, keyed by column id in display order."""
    columns = sorted(snapshot.columns, key=lambda column: column.order)
    return {
        column.id: project_column(snapshot.tasks.get(column.id, []), filters)
        for column in columns
    }


class BoardView:
    """Filter/sort control surface over a store.

    Holds only the ephemeral :class:`TaskFilters`; the projection is
    recomputed from the store's current state on every call.
    """

    def __init__(self, store: BoardStore, filters: TaskFilters | dict | None = None):
        self.store = store
        self.filters = validation.validate_filters(filters)

    def set_filter(self, partial: dict[str, Any] | None = None, **fields: Any) -> TaskFilters:
        """Merge a partial filter spec into the current one.

        An invalid field leaves the current filters unchanged.
        """
        merged = {**self.filters.model_dump(), **(partial or {}), **fields}
        self.filters = validation.validate_filters(merged)
        return self.filters

    def set_sort(self, sort: str | None) -> TaskFilters:
        if sort is not None:
            validation.validate_sort_key(sort)
        return self.set_filter(sort=sort)

    def reset_filters(self) -> TaskFilters:
        self.filters = TaskFilters()
        return self.filters

    def project(self) -> dict[str, list[Task]]:
        return project_board(self.store.snapshot(), self.filters)

    def visible_count(self) -> int:
        return sum(len(tasks) for tasks in self.project().values())

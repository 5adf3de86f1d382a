"""Board store - the single writer of board state.

The store owns three collections:

- columns, kept in display order with dense, distinct ``order`` ranks
- one ordered task list per column (column membership *is* list placement)
- labels, keyed by id

Every mutating method runs under :func:`_mutation`: the collections are
captured before the call and restored if the call raises, so a failed
operation never leaves a partial change behind. After each mutation the
placement invariant (every task id in exactly one list, exactly once) is
re-checked; a breach raises :class:`StateIntegrityViolation`.

Stored models are never mutated in place - updates swap in a copy - so the
capture only needs to copy the containers.
"""

from __future__ import annotations

import functools
import uuid
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from kanban_board.models.config_models import BoardConfig
from kanban_board.models.core import (
    BoardSnapshot,
    Column,
    Label,
    LabelCreate,
    Task,
    TaskCreate,
    utcnow,
)
from kanban_board.models.exceptions import (
    NotFoundError,
    StateIntegrityViolation,
    ValidationError,
)
from kanban_board.utils import validation
from kanban_board.utils.logger import get_logger

TaskId = str | int

F = TypeVar("F", bound=Callable[..., Any])

_State = tuple[list[Column], dict[str, list[Task]], dict[str, Label]]


def _mutation(method: F) -> F:
    """Run a store method atomically: roll back on any error, verify placement on success."""

    @functools.wraps(method)
    def wrapper(self: BoardStore, *args, **kwargs):
        saved = self._capture()
        try:
            result = method(self, *args, **kwargs)
            self._verify_integrity()
        except StateIntegrityViolation as e:
            self._restore(saved)
            get_logger("store").critical(
                "board integrity violation during %s: %s", method.__name__, e, exc_info=True
            )
            raise
        except Exception:
            self._restore(saved)
            raise
        return result

    return wrapper  # type: ignore[return-value]


class BoardStore:
    """In-memory board state with consistency-preserving operations.

    Args:
        snapshot: Initial state; the configured default seed when omitted
        settings: Board defaults and limits
    """

    def __init__(
        self,
        snapshot: BoardSnapshot | Mapping[str, Any] | None = None,
        *,
        settings: BoardConfig | None = None,
    ):
        self.settings = settings or BoardConfig()
        self._columns: list[Column] = []
        self._tasks: dict[str, list[Task]] = {}
        self._labels: dict[str, Label] = {}
        if snapshot is None:
            self.reset_state()
        else:
            self.replace_state(snapshot)

    def __repr__(self) -> str:
        return (
            f"BoardStore(columns={len(self._columns)}, "
            f"tasks={self.task_count()}, labels={len(self._labels)})"
        )

    # -------------------- internals --------------------

    def _capture(self) -> _State:
        return (
            list(self._columns),
            {column_id: list(tasks) for column_id, tasks in self._tasks.items()},
            dict(self._labels),
        )

    def _restore(self, state: _State) -> None:
        self._columns, self._tasks, self._labels = state

    def _verify_integrity(self) -> None:
        column_ids = [column.id for column in self._columns]
        if len(column_ids) != len(set(column_ids)):
            raise StateIntegrityViolation("duplicate column ids")
        if set(column_ids) != set(self._tasks):
            raise StateIntegrityViolation("task lists do not match the column set")
        if [column.order for column in self._columns] != list(range(len(self._columns))):
            raise StateIntegrityViolation("column order ranks are not dense and distinct")
        counts = Counter(task.id for tasks in self._tasks.values() for task in tasks)
        duplicated = [task_id for task_id, count in counts.items() if count > 1]
        if duplicated:
            raise StateIntegrityViolation(f"task {duplicated[0]!r} is placed more than once")

    def _new_id(self, prefix: str, taken: Iterable[object]) -> str:
        taken = set(taken)
        while True:
            candidate = f"{prefix}-{uuid.uuid4().hex[:12]}"
            if candidate not in taken:
                return candidate

    def _all_task_ids(self) -> set[TaskId]:
        return {task.id for tasks in self._tasks.values() for task in tasks}

    def _column_index(self, column_id: str) -> int:
        for index, column in enumerate(self._columns):
            if column.id == column_id:
                return index
        raise NotFoundError("column", column_id)

    def _locate(self, task_id: TaskId) -> tuple[str, int]:
        """Return (column id, position) of a task."""
        found = [
            (column_id, index)
            for column_id, tasks in self._tasks.items()
            for index, task in enumerate(tasks)
            if task.id == task_id
        ]
        if not found:
            raise NotFoundError("task", task_id)
        if len(found) > 1:
            raise StateIntegrityViolation(
                f"task {task_id!r} found in {len(found)} places: {found}"
            )
        return found[0]

    def _renumber(self) -> None:
        self._columns = [
            column if column.order == rank else column.model_copy(update={"order": rank})
            for rank, column in enumerate(self._columns)
        ]

    def _require_labels(self, label_ids: Iterable[str]) -> None:
        for label_id in label_ids:
            if label_id not in self._labels:
                raise NotFoundError("label", label_id)

    def _check_label_set(self, label_ids: list[str]) -> None:
        validation.check_label_cap(label_ids, self.settings.max_labels_per_task)
        self._require_labels(label_ids)

    def _replace_task(self, column_id: str, index: int, task: Task) -> Task:
        self._tasks[column_id][index] = task
        return task.model_copy(deep=True)

    # -------------------- queries --------------------

    @property
    def columns(self) -> list[Column]:
        """Columns in display order."""
        return [column.model_copy() for column in self._columns]

    @property
    def labels(self) -> list[Label]:
        return [label.model_copy() for label in self._labels.values()]

    def get_column(self, column_id: str) -> Column:
        return self._columns[self._column_index(column_id)].model_copy()

    def get_task(self, task_id: TaskId) -> Task:
        column_id, index = self._locate(task_id)
        return self._tasks[column_id][index].model_copy(deep=True)

    def get_label(self, label_id: str) -> Label:
        try:
            return self._labels[label_id].model_copy()
        except KeyError:
            raise NotFoundError("label", label_id) from None

    def has_task(self, task_id: TaskId) -> bool:
        return any(task.id == task_id for tasks in self._tasks.values() for task in tasks)

    def tasks_in(self, column_id: str) -> list[Task]:
        """Tasks of a column in stored order."""
        if column_id not in self._tasks:
            raise NotFoundError("column", column_id)
        return [task.model_copy(deep=True) for task in self._tasks[column_id]]

    def column_of(self, task_id: TaskId) -> str:
        return self._locate(task_id)[0]

    def task_count(self, column_id: str | None = None) -> int:
        if column_id is None:
            return sum(len(tasks) for tasks in self._tasks.values())
        if column_id not in self._tasks:
            raise NotFoundError("column", column_id)
        return len(self._tasks[column_id])

    def resolve_labels(self, task: Task | TaskId) -> list[Label]:
        """Label records of a task, silently dropping dangling ids."""
        if not isinstance(task, Task):
            task = self.get_task(task)
        return [
            self._labels[label_id].model_copy()
            for label_id in task.labels
            if label_id in self._labels
        ]

    # -------------------- columns --------------------

    @_mutation
    def add_column(self, title: str, *, column_id: str | None = None) -> Column:
        """Append a column at the end of the board (order = current column count)."""
        data = validation.validate_column_create(title)
        if column_id is None:
            column_id = self._new_id("col", self._tasks)
        else:
            column_id = str(column_id).strip()
            if not column_id:
                raise ValidationError("column_id", "cannot be empty")
            if column_id in self._tasks:
                raise ValidationError("column_id", f"column {column_id!r} already exists")
        column = Column(id=column_id, title=data.title, order=len(self._columns))
        self._columns.append(column)
        self._tasks[column_id] = []
        return column.model_copy()

    @_mutation
    def edit_column(self, column_id: str, patch: Mapping[str, Any]) -> Column:
        """Apply a title and/or order change; a new order moves the column to that rank."""
        fields = validation.validate_column_update(patch)
        index = self._column_index(column_id)
        column = self._columns[index]
        if "title" in fields:
            column = column.model_copy(update={"title": fields["title"]})
        self._columns[index] = column
        if "order" in fields:
            target = min(fields["order"], len(self._columns) - 1)
            self._columns.insert(target, self._columns.pop(index))
            self._renumber()
        return self.get_column(column_id)

    @_mutation
    def delete_column(
        self,
        column_id: str,
        *,
        cascade: bool = False,
        move_tasks_to: str | None = None,
    ) -> int:
        """Remove a column, deciding explicitly what happens to its tasks.

        Args:
            column_id: Column to remove
            cascade: Delete the column's tasks with it
            move_tasks_to: Relocate the column's tasks to this column first

        Returns:
            Number of tasks deleted or relocated
        """
        index = self._column_index(column_id)
        tasks = self._tasks[column_id]
        if cascade and move_tasks_to is not None:
            raise ValidationError("move_tasks_to", "cannot both cascade and relocate tasks")
        if move_tasks_to is not None:
            if not move_tasks_to or move_tasks_to not in self._tasks:
                raise ValidationError(
                    "move_tasks_to", f"target column {move_tasks_to!r} does not exist"
                )
            if move_tasks_to == column_id:
                raise ValidationError("move_tasks_to", "cannot relocate tasks into the deleted column")
            self.move_all_tasks(column_id, move_tasks_to)
        elif tasks and not cascade:
            raise ValidationError(
                "tasks",
                f"column {column_id!r} still holds {len(tasks)} task(s); "
                "delete them with the column or move them first",
            )
        del self._tasks[column_id]
        del self._columns[index]
        self._renumber()
        return len(tasks)

    def delete_column_with_tasks(self, column_id: str) -> int:
        """Delete a column and, irreversibly, every task in it."""
        return self.delete_column(column_id, cascade=True)

    def delete_column_moving_tasks(self, column_id: str, target_column_id: str | None) -> int:
        """Move a column's tasks (keeping their order) to another column, then delete it."""
        if target_column_id is None:
            raise ValidationError("move_tasks_to", "a target column is required")
        return self.delete_column(column_id, move_tasks_to=target_column_id)

    # -------------------- tasks --------------------

    @_mutation
    def add_task(
        self, column_id: str, task_data: Mapping[str, Any] | TaskCreate | None = None
    ) -> Task:
        """Create a task at the end of a column, filling in board defaults."""
        if column_id not in self._tasks:
            raise NotFoundError("column", column_id)
        data = validation.validate_task_create(task_data)
        self._check_label_set(data.labels)
        task = Task(
            id=self._new_id("task", self._all_task_ids()),
            title=data.title,
            details=data.details,
            priority=data.priority or self.settings.default_priority,
            rating=self.settings.default_rating if data.rating is None else data.rating,
            labels=data.labels,
            starred=data.starred,
            status=data.status,
            created_at=data.created_at or utcnow(),
            due_date=data.due_date,
        )
        self._tasks[column_id].append(task)
        return task.model_copy(deep=True)

    @_mutation
    def edit_task(self, task_id: TaskId, patch: Mapping[str, Any]) -> Task:
        """Merge validated fields into a task without changing its column."""
        fields = validation.validate_task_update(patch)
        column_id, index = self._locate(task_id)
        if "labels" in fields:
            self._check_label_set(fields["labels"])
        task = self._tasks[column_id][index].model_copy(update=fields)
        return self._replace_task(column_id, index, task)

    @_mutation
    def delete_task(self, task_id: TaskId, *, missing_ok: bool = False) -> bool:
        """Remove a task from its column.

        Returns:
            True when removed; False for an absent id when ``missing_ok`` is set
        """
        try:
            column_id, index = self._locate(task_id)
        except NotFoundError:
            if missing_ok:
                return False
            raise
        del self._tasks[column_id][index]
        return True

    @_mutation
    def move_task(
        self, task_id: TaskId, target_column_id: str, target_index: int | None = None
    ) -> Task:
        """Relocate a task to a position in a column (default: the end).

        ``target_index`` is a position in the target list once the task has
        left its source, so moving within one column reorders it. Indexes past
        the end clamp to the end.
        """
        position = validation.validate_target_index(target_index)
        if target_column_id not in self._tasks:
            raise NotFoundError("column", target_column_id)
        source_id, index = self._locate(task_id)
        task = self._tasks[source_id].pop(index)
        target = self._tasks[target_column_id]
        if position is None or position > len(target):
            position = len(target)
        target.insert(position, task)
        return task.model_copy(deep=True)

    @_mutation
    def move_all_tasks(self, from_column_id: str, to_column_id: str) -> int:
        """Append every task of one column to another, preserving relative order."""
        for column_id in (from_column_id, to_column_id):
            if column_id not in self._tasks:
                raise NotFoundError("column", column_id)
        if from_column_id == to_column_id:
            return 0
        moved = self._tasks[from_column_id]
        self._tasks[to_column_id].extend(moved)
        self._tasks[from_column_id] = []
        return len(moved)

    # -------------------- labels --------------------

    @_mutation
    def add_label(
        self, label_data: Mapping[str, Any] | LabelCreate, *, label_id: str | None = None
    ) -> Label:
        data = validation.validate_label_create(label_data)
        if label_id is None:
            label_id = self._new_id("lbl", self._labels)
        else:
            label_id = str(label_id).strip()
            if not label_id:
                raise ValidationError("label_id", "cannot be empty")
            if label_id in self._labels:
                raise ValidationError("label_id", f"label {label_id!r} already exists")
        label = Label(id=label_id, name=data.name, color=data.color)
        self._labels[label.id] = label
        return label.model_copy()

    @_mutation
    def edit_label(self, label_id: str, patch: Mapping[str, Any]) -> Label:
        fields = validation.validate_label_update(patch)
        if label_id not in self._labels:
            raise NotFoundError("label", label_id)
        self._labels[label_id] = self._labels[label_id].model_copy(update=fields)
        return self._labels[label_id].model_copy()

    @_mutation
    def delete_label(self, label_id: str) -> int:
        """Delete a label and detach it from every task.

        Returns:
            Number of tasks the label was detached from
        """
        if label_id not in self._labels:
            raise NotFoundError("label", label_id)
        del self._labels[label_id]
        detached = 0
        for column_id, tasks in self._tasks.items():
            for index, task in enumerate(tasks):
                if label_id in task.labels:
                    remaining = [other for other in task.labels if other != label_id]
                    tasks[index] = task.model_copy(update={"labels": remaining})
                    detached += 1
        return detached

    @_mutation
    def attach_label(self, task_id: TaskId, label_id: str) -> Task:
        """Add a label to a task; attaching an already-attached label is a no-op."""
        column_id, index = self._locate(task_id)
        if label_id not in self._labels:
            raise NotFoundError("label", label_id)
        task = self._tasks[column_id][index]
        if label_id in task.labels:
            return task.model_copy(deep=True)
        labels = [*task.labels, label_id]
        validation.check_label_cap(labels, self.settings.max_labels_per_task)
        return self._replace_task(column_id, index, task.model_copy(update={"labels": labels}))

    @_mutation
    def detach_label(self, task_id: TaskId, label_id: str) -> Task:
        """Remove a label from a task; detaching an absent label is a no-op."""
        column_id, index = self._locate(task_id)
        task = self._tasks[column_id][index]
        if label_id not in task.labels:
            return task.model_copy(deep=True)
        labels = [other for other in task.labels if other != label_id]
        return self._replace_task(column_id, index, task.model_copy(update={"labels": labels}))

    # -------------------- whole-state hooks --------------------

    def snapshot(self) -> BoardSnapshot:
        """The full normalized state as an independent, serializable copy."""
        return BoardSnapshot(
            columns=self.columns,
            tasks={column.id: self.tasks_in(column.id) for column in self._columns},
            labels=self.labels,
        )

    def export_state(self) -> dict[str, Any]:
        """The snapshot as a JSON-ready dict (camelCase task timestamps)."""
        return self.snapshot().model_dump(mode="json", by_alias=True)

    @_mutation
    def replace_state(self, snapshot: BoardSnapshot | Mapping[str, Any]) -> None:
        """Hydrate the store wholesale, e.g. after login or import.

        The snapshot is checked in full before anything is swapped in.
        Dangling label references on tasks are kept (they are dropped at
        display time).
        """
        snapshot = validation.validate_snapshot(snapshot)

        column_ids = [column.id for column in snapshot.columns]
        duplicate_columns = [cid for cid, count in Counter(column_ids).items() if count > 1]
        if duplicate_columns:
            raise ValidationError("columns", f"duplicate column id {duplicate_columns[0]!r}")
        unknown = [cid for cid in snapshot.tasks if cid not in column_ids]
        if unknown:
            raise ValidationError("tasks", f"task list for unknown column {unknown[0]!r}")
        counts = Counter(task.id for tasks in snapshot.tasks.values() for task in tasks)
        duplicate_tasks = [tid for tid, count in counts.items() if count > 1]
        if duplicate_tasks:
            raise ValidationError("tasks", f"task {duplicate_tasks[0]!r} appears more than once")
        label_counts = Counter(label.id for label in snapshot.labels)
        duplicate_labels = [lid for lid, count in label_counts.items() if count > 1]
        if duplicate_labels:
            raise ValidationError("labels", f"duplicate label id {duplicate_labels[0]!r}")

        # Stable sort keeps insertion order for tied ranks before renumbering.
        self._columns = sorted(snapshot.columns, key=lambda column: column.order)
        self._renumber()
        self._tasks = {cid: list(snapshot.tasks.get(cid, [])) for cid in column_ids}
        self._labels = {label.id: label for label in snapshot.labels}
        get_logger("store").info(
            "board state replaced: %d columns, %d tasks, %d labels",
            len(self._columns),
            self.task_count(),
            len(self._labels),
        )

    @_mutation
    def reset_state(self) -> None:
        """Restore the default seed: the configured columns, no tasks, no labels."""
        self._columns = [
            Column(id=seed.id, title=seed.title, order=rank)
            for rank, seed in enumerate(self.settings.default_columns)
        ]
        self._tasks = {column.id: [] for column in self._columns}
        self._labels = {}

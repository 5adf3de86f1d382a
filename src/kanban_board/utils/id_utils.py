"""Resolve the ids users type on the command line.

Ids are long (``task-3f9a1c0b2d4e``), so commands accept any unique prefix
of at least :data:`MIN_PREFIX_LENGTH` characters. Boards imported from older
data may carry integer task ids; a purely numeric reference matches those.
"""

from __future__ import annotations

from collections.abc import Iterable

from kanban_board.models.exceptions import NotFoundError, ValidationError
from kanban_board.services.board_store import BoardStore, TaskId

MIN_PREFIX_LENGTH = 4


def resolve_id(reference: str, candidates: Iterable[TaskId], kind: str) -> TaskId:
    """Match *reference* against *candidates* exactly, numerically, then by prefix.

    Raises:
        NotFoundError: If nothing matches
        ValidationError: If a prefix matches more than one id
    """
    candidates = list(candidates)
    reference = reference.strip()

    for candidate in candidates:
        if str(candidate) == reference and not isinstance(candidate, int):
            return candidate
    if reference.lstrip("-").isdigit() and int(reference) in candidates:
        return int(reference)

    if len(reference) >= MIN_PREFIX_LENGTH:
        matches = [c for c in candidates if str(c).startswith(reference)]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            shown = ", ".join(str(c) for c in matches[:5])
            raise ValidationError("id", f"{reference!r} matches several {kind}s: {shown}")

    raise NotFoundError(kind, reference)


def resolve_task_id(store: BoardStore, reference: str) -> TaskId:
    task_ids = [task.id for column in store.columns for task in store.tasks_in(column.id)]
    return resolve_id(reference, task_ids, "task")


def resolve_column_id(store: BoardStore, reference: str) -> str:
    return str(resolve_id(reference, [column.id for column in store.columns], "column"))


def resolve_label_id(store: BoardStore, reference: str) -> str:
    return str(resolve_id(reference, [label.id for label in store.labels], "label"))

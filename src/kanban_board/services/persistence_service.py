"""Per-user board persistence.

Each user's board snapshot lives in its own JSON file under
``<data_dir>/boards/``. File names come from the user key passed through
:func:`sanitize_filename`, so an email address is safe to use as a key.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from kanban_board.models.core import BoardSnapshot
from kanban_board.utils.logger import get_logger
from kanban_board.utils.sanitization import sanitize_filename


class PersistenceService:
    """Load and save board snapshots keyed by user."""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)
        self.boards_dir = self.data_dir / "boards"

    def path_for(self, user_key: str) -> Path:
        """Return the snapshot file path for *user_key*."""
        return self.boards_dir / f"{sanitize_filename(user_key)}.json"

    def load_persisted_state(self, user_key: str) -> BoardSnapshot | None:
        """Load a user's snapshot.

        Returns:
            The snapshot, or None when there is no file or it cannot be read
        """
        path = self.path_for(user_key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return BoardSnapshot.model_validate_json(f.read())
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            get_logger("persistence").warning("ignoring unreadable board file %s: %s", path, e)
            return None

    def persist_state(self, user_key: str, snapshot: BoardSnapshot) -> Path:
        """Write a user's snapshot, replacing any previous file atomically."""
        path = self.path_for(user_key)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = snapshot.model_dump(mode="json", by_alias=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".board-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        get_logger("persistence").debug("persisted board for %s to %s", user_key, path)
        return path

    def clear_user_data(self, user_key: str) -> bool:
        """Delete a user's snapshot file. Returns True if one existed."""
        path = self.path_for(user_key)
        if not path.exists():
            return False
        path.unlink()
        get_logger("persistence").info("cleared board data for %s", user_key)
        return True

    def list_users(self) -> list[str]:
        """File-name keys of every persisted board, sorted."""
        if not self.boards_dir.exists():
            return []
        return sorted(path.stem for path in self.boards_dir.glob("*.json"))

"""Shared test fixtures and configuration.

Every test runs with platformdirs lookups redirected into *tmp_path*, so no
test touches the real config, data or log directories.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from kanban_board.services.board_store import BoardStore
from kanban_board.services.config_service import ConfigService, get_config_service
from kanban_board.services.persistence_service import PersistenceService


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


def _reset_logger() -> None:
    import kanban_board.utils.logger as logger_mod

    logger_mod._logger = None
    existing = logging.getLogger("kanban_board")
    for handler in list(existing.handlers):
        handler.close()
        existing.removeHandler(handler)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point config, data and log directories at tmp_path subfolders."""
    dirs = {
        "config": tmp_path / "config",
        "data": tmp_path / "data",
        "logs": tmp_path / "logs",
    }
    get_config_service.cache_clear()
    _reset_logger()
    with (
        patch(
            "kanban_board.services.config_service.user_config_dir",
            return_value=str(dirs["config"]),
        ),
        patch(
            "kanban_board.services.config_service.user_data_dir",
            return_value=str(dirs["data"]),
        ),
        patch("kanban_board.utils.logger.user_log_dir", return_value=str(dirs["logs"])),
    ):
        yield dirs
    get_config_service.cache_clear()
    _reset_logger()


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def store() -> BoardStore:
    """A store holding the default seed: todo, in-progress, done."""
    return BoardStore()


@pytest.fixture()
def persistence(isolated_dirs) -> PersistenceService:
    return PersistenceService(isolated_dirs["data"])


@pytest.fixture()
def config_service(isolated_dirs) -> ConfigService:
    """A real ConfigService writing into the isolated config dir."""
    return get_config_service()

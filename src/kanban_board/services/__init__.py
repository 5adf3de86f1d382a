"""Services module for the kanban board - business logic layer."""

from .auth_service import AuthService
from .board_service import BoardSession, open_board
from .board_store import BoardStore
from .config_service import ConfigService, get_config_service
from .persistence_service import PersistenceService
from .view_projector import BoardView, project_board, project_column

__all__ = [
    "BoardStore",
    "BoardView",
    "project_board",
    "project_column",
    "PersistenceService",
    "AuthService",
    "ConfigService",
    "get_config_service",
    "BoardSession",
    "open_board",
]

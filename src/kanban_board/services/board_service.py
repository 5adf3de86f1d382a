"""Board sessions: load the current user's board, save it when a command succeeds."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from kanban_board.models.config_models import AppConfig
from kanban_board.services.board_store import BoardStore
from kanban_board.services.config_service import ConfigService, get_config_service
from kanban_board.services.persistence_service import PersistenceService
from kanban_board.services.view_projector import BoardView

GUEST_USER = "guest"


class BoardSession:
    """A board store bound to the user whose board it holds.

    Boards of users who are not logged in are kept under ``guest``.
    """

    def __init__(
        self,
        persistence: PersistenceService,
        config: AppConfig,
        *,
        user: str | None = None,
        load: bool = True,
    ):
        self.persistence = persistence
        self.config = config
        self.user = user
        self.store = BoardStore(settings=config.board)
        if load:
            self.load()

    @property
    def user_key(self) -> str:
        return self.user or GUEST_USER

    def load(self) -> None:
        """Replace the store contents with the persisted board, or the seed."""
        snapshot = self.persistence.load_persisted_state(self.user_key)
        if snapshot is None:
            self.store.reset_state()
        else:
            self.store.replace_state(snapshot)

    def save(self) -> None:
        self.persistence.persist_state(self.user_key, self.store.snapshot())

    def view(self) -> BoardView:
        return BoardView(self.store)


@contextmanager
def open_board(
    config_service: ConfigService | None = None, *, load: bool = True, persist: bool = True
) -> Iterator[BoardSession]:
    """Yield the current user's board session and persist it if the block succeeds.

    An exception inside the block propagates without saving, so a failed
    command never writes partial state. Read-only callers pass
    ``persist=False``.
    """
    config_service = config_service or get_config_service()
    config = config_service.config
    session = BoardSession(
        PersistenceService(config_service.data_dir),
        config,
        user=config.session.current_user,
        load=load,
    )
    yield session
    if persist:
        session.save()

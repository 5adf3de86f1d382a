"""Local account registry and session switching.

Accounts live in ``<data_dir>/users.json`` with salted PBKDF2 password
hashes. A successful login or signup makes that user current and hydrates
the board store with their persisted board (or the default seed); logging
out saves the board for the user and resets the store. A rejected request
records its message on :attr:`AuthService.state` and raises
:class:`AuthError`, leaving the store exactly as it was.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import json
import os
import uuid
from collections.abc import Awaitable
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from kanban_board.models.auth_models import AuthState, AuthUser, UserRecord
from kanban_board.models.config_models import AuthConfig
from kanban_board.models.exceptions import AuthError
from kanban_board.services.board_store import BoardStore
from kanban_board.services.persistence_service import PersistenceService
from kanban_board.utils.logger import get_logger
from kanban_board.utils.sanitization import sanitize_email, sanitize_input

PBKDF2_ITERATIONS = 100_000
SALT_SIZE = 16  # 128 bits
MAX_PASSWORD_INPUT = 100

_USERS_FILE = "users.json"
_registry_adapter = TypeAdapter(list[UserRecord])


def hash_password(password: str, salt: bytes) -> str:
    """Derive a base64 PBKDF2-SHA256 digest of *password*."""
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return base64.b64encode(digest).decode("ascii")


def verify_password(password: str, record: UserRecord) -> bool:
    salt = base64.b64decode(record.salt)
    return hmac.compare_digest(hash_password(password, salt), record.password_hash)


class AuthService:
    """Signup, login and logout against the local registry.

    Args:
        data_dir: Directory holding ``users.json``
        store: The board store to hydrate on login and reset on logout
        persistence: Where per-user boards are saved and loaded
        settings: Password limits and simulated delay
    """

    def __init__(
        self,
        data_dir: Path | str,
        store: BoardStore,
        persistence: PersistenceService,
        settings: AuthConfig | None = None,
    ):
        self.data_dir = Path(data_dir)
        self.users_path = self.data_dir / _USERS_FILE
        self.store = store
        self.persistence = persistence
        self.settings = settings or AuthConfig()
        self.state = AuthState()

    @property
    def current_user(self) -> AuthUser | None:
        return self.state.user

    # -------------------- registry --------------------

    def load_users(self) -> list[UserRecord]:
        """Registered accounts; an unreadable registry counts as empty."""
        if not self.users_path.exists():
            return []
        try:
            with open(self.users_path, encoding="utf-8") as f:
                return _registry_adapter.validate_json(f.read())
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            get_logger("auth").warning(
                "ignoring unreadable user registry %s: %s", self.users_path, e
            )
            return []

    def save_users(self, users: list[UserRecord]) -> None:
        self.users_path.parent.mkdir(parents=True, exist_ok=True)
        payload = _registry_adapter.dump_python(users, mode="json")
        with open(self.users_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        self.users_path.chmod(0o600)

    def find_user(self, email: str) -> UserRecord | None:
        for record in self.load_users():
            if record.email == email:
                return record
        return None

    def resume(self, email: str | None) -> AuthUser | None:
        """Mark a remembered user as logged in without re-checking the password.

        The store is not touched; callers resuming a session have already
        loaded that user's board.
        """
        record = self.find_user(sanitize_email(email)) if email else None
        if record is None:
            self.state = AuthState()
            return None
        self.state = AuthState(status="fulfilled", user=record.public())
        return self.state.user

    # -------------------- requests --------------------

    async def signup(self, email: str, password: str) -> AuthUser:
        """Register a new account and sign it in with a fresh board."""
        return await self._run("signup", self._signup(email, password))

    async def login(self, email: str, password: str) -> AuthUser:
        """Check credentials and switch the store to the user's board."""
        return await self._run("login", self._login(email, password))

    async def logout(self) -> None:
        """Save the current user's board, then reset the store to the seed."""
        user = self.state.user
        if user is not None:
            self.persistence.persist_state(user.email, self.store.snapshot())
            get_logger("auth").info("logged out %s", user.email)
        self.store.reset_state()
        self.state = AuthState()

    async def _run(self, action: str, request: Awaitable[AuthUser]) -> AuthUser:
        previous = self.state.user
        self.state = AuthState(status="pending", user=previous)
        try:
            user = await request
        except AuthError as e:
            self.state = AuthState(status="rejected", user=previous, error=str(e))
            get_logger("auth").warning("%s rejected: %s", action, e)
            raise
        except Exception:
            self.state = AuthState(
                status="rejected",
                user=previous,
                error=f"{action.capitalize()} failed. Please try again.",
            )
            raise
        self.state = AuthState(status="fulfilled", user=user)
        get_logger("auth").info("%s succeeded for %s", action, user.email)
        return user

    async def _delay(self) -> None:
        if self.settings.simulated_delay > 0:
            await asyncio.sleep(self.settings.simulated_delay)

    async def _signup(self, email: str, password: str) -> AuthUser:
        clean_email = sanitize_email(email)
        clean_password = self._clean_password(password)

        await self._delay()

        if not clean_email:
            raise AuthError("Please enter a valid email address")
        minimum = self.settings.min_password_length
        maximum = self.settings.max_password_length
        if len(clean_password) < minimum:
            raise AuthError(f"Password must be at least {minimum} characters long")
        if len(clean_password) > maximum:
            raise AuthError(f"Password must be at most {maximum} characters long")

        users = self.load_users()
        if any(record.email == clean_email for record in users):
            raise AuthError("User already registered. Please login instead.")

        salt = os.urandom(SALT_SIZE)
        record = UserRecord(
            id=f"user-{uuid.uuid4().hex[:12]}",
            email=clean_email,
            password_hash=hash_password(clean_password, salt),
            salt=base64.b64encode(salt).decode("ascii"),
        )
        # register only once the board switch has gone through
        user = record.public()
        before = self.store.snapshot()
        self._switch_board(user)
        try:
            self.save_users([*users, record])
        except OSError:
            self.store.replace_state(before)
            raise
        return user

    async def _login(self, email: str, password: str) -> AuthUser:
        clean_email = sanitize_email(email)
        clean_password = self._clean_password(password)

        if not clean_email:
            raise AuthError("Please enter a valid email address")
        if not clean_password:
            raise AuthError("Password is required")

        await self._delay()

        record = self.find_user(clean_email)
        if record is None:
            raise AuthError("User not registered. Please sign up first.")
        if not verify_password(clean_password, record):
            raise AuthError("Invalid password")

        user = record.public()
        self._switch_board(user)
        return user

    def _clean_password(self, password: str) -> str:
        return sanitize_input(password, max_length=MAX_PASSWORD_INPUT, preserve_newlines=False)

    def _switch_board(self, user: AuthUser) -> None:
        """Load *user*'s board into the store, saving the previous user's first."""
        snapshot = self.persistence.load_persisted_state(user.email)
        previous = self.state.user
        if previous is not None and previous.email != user.email:
            self.persistence.persist_state(previous.email, self.store.snapshot())
        if snapshot is None:
            self.store.reset_state()
        else:
            self.store.replace_state(snapshot)

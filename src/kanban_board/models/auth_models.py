"""Local account models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from .core import utcnow

AuthStatus = Literal["idle", "pending", "fulfilled", "rejected"]


class AuthUser(BaseModel):
    """The public view of an account (never carries password material)."""

    id: str
    email: str


class UserRecord(BaseModel):
    """A registered account as stored in the user registry.

    Attributes:
        id: Unique account identifier
        email: Sanitized, lower-cased email address
        password_hash: Base64 PBKDF2-SHA256 digest
        salt: Base64 random salt used for the digest
        created_at: Registration timestamp
    """

    id: str
    email: str
    password_hash: str
    salt: str
    created_at: datetime = Field(default_factory=utcnow)

    def public(self) -> AuthUser:
        return AuthUser(id=self.id, email=self.email)


class AuthState(BaseModel):
    """Outcome of the most recent auth request."""

    status: AuthStatus = "idle"
    user: AuthUser | None = None
    error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def loading(self) -> bool:
        return self.status == "pending"

"""Application configuration models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .core import Priority


class ColumnSeed(BaseModel):
    """A column created when a board is reset to its defaults."""

    id: str
    title: str

    @field_validator("id", "title")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("cannot be empty")
        return v.strip()


def _default_columns() -> list[ColumnSeed]:
    return [
        ColumnSeed(id="todo", title="To Do"),
        ColumnSeed(id="in-progress", title="In Progress"),
        ColumnSeed(id="done", title="Done"),
    ]


class BoardConfig(BaseModel):
    """Board defaults and limits."""

    default_columns: list[ColumnSeed] = Field(default_factory=_default_columns)
    max_labels_per_task: int = Field(default=10, ge=1)
    default_rating: float = Field(default=8.8, ge=0, le=10)
    default_priority: Priority = Field(default="Medium")

    @field_validator("default_columns")
    @classmethod
    def validate_unique_ids(cls, v: list[ColumnSeed]) -> list[ColumnSeed]:
        ids = [seed.id for seed in v]
        if len(ids) != len(set(ids)):
            raise ValueError("default column ids must be unique")
        return v


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["pretty", "table", "json", "yaml"] = Field(default="pretty")
    color: bool = Field(default=True)


class AuthConfig(BaseModel):
    """Local account configuration."""

    simulated_delay: float = Field(default=0.0, ge=0)
    min_password_length: int = Field(default=6, ge=1)
    max_password_length: int = Field(default=50, ge=1)


class SessionConfig(BaseModel):
    """Who is logged in on this machine."""

    current_user: str | None = None


class AppConfig(BaseModel):
    """Main kanban configuration."""

    board: BoardConfig = Field(default_factory=BoardConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

    def get_value(self, key: str):
        """Read a setting by dotted key, e.g. ``board.default_rating``."""
        node = self
        for part in key.split("."):
            if not isinstance(node, BaseModel) or part not in type(node).model_fields:
                raise KeyError(key)
            node = getattr(node, part)
        return node

    def with_value(self, key: str, value) -> AppConfig:
        """Return a validated copy with the dotted key set to *value*."""
        parts = key.split(".")
        self.get_value(key)
        data = self.model_dump()
        node = data
        for part in parts[:-1]:
            node = node[part]
        node[parts[-1]] = value
        return AppConfig.model_validate(data)

"""Configuration service for the kanban CLI.

This module provides the ConfigService class, the single source of truth for
application settings. It handles:

- Loading and saving config.json in the platform config directory
- Creating the default config on first run
- Reading and writing individual settings by dotted key
- Locating the data directory that holds boards and the user registry
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import ValidationError as PydanticValidationError

from kanban_board.models.config_models import AppConfig
from kanban_board.models.exceptions import ValidationError
from kanban_board.utils.logger import get_logger
from kanban_board.utils.validation import to_validation_error

_APP_NAME = "kanban_board"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(_APP_NAME))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, creating the default on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            self._config = AppConfig()
            self.save_config()
        except (OSError, PydanticValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to disk."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()
        get_logger("config").info("configuration reset to defaults")
        return self._config

    def get(self, key: str) -> Any:
        """Read a setting by dotted key, e.g. ``output.format``.

        Raises:
            ValidationError: If the key does not name a setting
        """
        try:
            return self.config.get_value(key)
        except KeyError:
            raise ValidationError("key", f"unknown setting {key!r}") from None

    def set(self, key: str, value: Any) -> Any:
        """Validate and store a setting by dotted key; returns the stored value."""
        try:
            updated = self.config.with_value(key, value)
        except KeyError:
            raise ValidationError("key", f"unknown setting {key!r}") from None
        except PydanticValidationError as e:
            error = to_validation_error(e)
            raise ValidationError(key, error.message) from e
        self._config = updated
        self.save_config()
        get_logger("config").info("set %s = %r", key, value)
        return updated.get_value(key)

    def set_current_user(self, email: str | None) -> None:
        """Remember (or forget) the logged-in user for later commands."""
        self.set("session.current_user", email)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service

"""Unit tests for ConfigService."""

import json

import pytest

from kanban_board.models.config_models import AppConfig
from kanban_board.models.exceptions import ValidationError
from kanban_board.services.config_service import ConfigService, get_config_service


class TestConfigService:
    def test_first_run_writes_default_config(self, isolated_dirs):
        service = ConfigService()

        config = service.load_config()

        assert config == AppConfig()
        assert service.config_path.parent == isolated_dirs["config"]
        assert json.loads(service.config_path.read_text())["output"]["format"] == "pretty"
        assert service.data_dir.is_dir()

    def test_config_file_is_private(self, config_service):
        assert config_service.config_path.stat().st_mode & 0o777 == 0o600

    def test_existing_config_is_loaded(self, isolated_dirs):
        isolated_dirs["config"].mkdir(parents=True)
        (isolated_dirs["config"] / "config.json").write_text(
            json.dumps({"output": {"format": "json"}})
        )

        assert ConfigService().config.output.format == "json"

    def test_invalid_config_raises(self, isolated_dirs):
        isolated_dirs["config"].mkdir(parents=True)
        (isolated_dirs["config"] / "config.json").write_text('{"output": {"format": "xml"}}')

        with pytest.raises(RuntimeError, match="Failed to load config"):
            ConfigService().load_config()

    def test_get_by_dotted_key(self, config_service):
        assert config_service.get("board.default_rating") == 8.8
        assert config_service.get("output").color is True

    def test_get_unknown_key(self, config_service):
        with pytest.raises(ValidationError, match="unknown setting"):
            config_service.get("board.colour")

    def test_set_validates_and_persists(self, config_service):
        assert config_service.set("board.default_priority", "High") == "High"

        reloaded = ConfigService()
        assert reloaded.config.board.default_priority == "High"

    def test_set_rejects_invalid_value(self, config_service):
        with pytest.raises(ValidationError) as exc_info:
            config_service.set("board.default_rating", 11)

        assert exc_info.value.field == "board.default_rating"
        assert config_service.get("board.default_rating") == 8.8

    def test_set_unknown_key(self, config_service):
        with pytest.raises(ValidationError):
            config_service.set("nope", 1)

    def test_current_user_round_trip(self, config_service):
        config_service.set_current_user("alice@example.com")
        assert ConfigService().config.session.current_user == "alice@example.com"

        config_service.set_current_user(None)
        assert config_service.config.session.current_user is None

    def test_reset_config(self, config_service):
        config_service.set("output.color", False)

        config = config_service.reset_config()

        assert config.output.color is True
        assert ConfigService().config == AppConfig()


def test_get_config_service_is_cached():
    assert get_config_service() is get_config_service()

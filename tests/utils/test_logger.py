"""Tests for the application logger utility."""

from __future__ import annotations

import logging
import logging.handlers

from kanban_board.utils.logger import get_logger


def _flush(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.flush()


def test_get_logger_creates_log_file(isolated_dirs):
    logger = get_logger()

    assert (isolated_dirs["logs"] / "kanban.log").exists()
    assert isinstance(logger, logging.Logger)


def test_get_logger_returns_singleton():
    assert get_logger() is get_logger()


def test_component_logger_is_a_child():
    child = get_logger("store")
    assert child.name == "kanban_board.store"
    assert child.parent is get_logger()


def test_messages_reach_the_file(isolated_dirs):
    root = get_logger()
    get_logger("persistence").warning("hello from test")
    _flush(root)

    content = (isolated_dirs["logs"] / "kanban.log").read_text(encoding="utf-8")
    assert "hello from test" in content
    assert "[kanban_board.persistence]" in content


def test_single_rotating_handler():
    get_logger()
    logger = get_logger()

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.handlers.RotatingFileHandler)
    assert logger.propagate is False


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("KANBAN_LOG_LEVEL", "warning")
    assert get_logger().level == logging.WARNING


def test_unknown_level_falls_back_to_debug(monkeypatch):
    monkeypatch.setenv("KANBAN_LOG_LEVEL", "chatty")
    assert get_logger().level == logging.DEBUG

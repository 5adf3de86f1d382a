"""Fixtures for CLI command tests."""

from __future__ import annotations

import re

import pytest
from typer.testing import CliRunner

from kanban_board.main import app
from kanban_board.services.board_service import open_board

_ID_PATTERN = r"(?:task|col|lbl)-[0-9a-f]{12}"


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def invoke(runner):
    """Run the kanban CLI with the given arguments."""

    def _invoke(*args: str, input: str | None = None):
        return runner.invoke(app, list(args), input=input)

    return _invoke


@pytest.fixture()
def created_id():
    """Pull the first generated id out of command output."""

    def _created_id(output: str) -> str:
        match = re.search(_ID_PATTERN, output)
        assert match, output
        return match.group(0)

    return _created_id


@pytest.fixture()
def saved_board():
    """Read the persisted board of the current user without saving it back."""

    def _saved_board():
        with open_board(persist=False) as session:
            return session.store

    return _saved_board

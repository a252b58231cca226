"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from trellord_connector.config import BoardConfig
from trellord_connector.relay.state import RelayContext
from trellord_connector.trello.models import Action

SERVER_START = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
AFTER_START = "2024-01-01T12:05:00.000Z"
BEFORE_START = "2024-01-01T11:55:00.000Z"


def board_config(**overrides: Any) -> BoardConfig:
    """Build a BoardConfig from board-file style keys."""
    data: dict[str, Any] = {
        "boardId": "board-1",
        "boardName": "Roadmap",
        "check_interval": 60000,
        "timer_duration": 30000,
        "discord_configs": {
            "webhookUrl": "https://discord.com/api/webhooks/1/token-1",
            "username": "",
            "avatar_url": "",
        },
    }
    data.update(overrides)
    return BoardConfig.model_validate(data)


@pytest.fixture
def board() -> BoardConfig:
    """A board with default settings."""
    return board_config()


@pytest.fixture
def other_board() -> BoardConfig:
    """A second board with its own webhook."""
    return board_config(
        boardId="board-2",
        boardName="Support",
        discord_configs={"webhookUrl": "https://discord.com/api/webhooks/2/token-2"},
    )


@pytest.fixture
def context() -> RelayContext:
    """Relay state with a fixed start instant."""
    return RelayContext(server_start=SERVER_START)


@pytest.fixture
def make_action() -> Callable[..., Action]:
    """Factory for actions dated after the server start."""

    def _make(
        action_id: str = "a1",
        action_type: str = "createCard",
        data: dict[str, Any] | None = None,
        date: str = AFTER_START,
        **extra: Any,
    ) -> Action:
        entry: dict[str, Any] = {
            "id": action_id,
            "type": action_type,
            "date": date,
            "data": data if data is not None else {"card": {"name": "Task", "shortLink": "abc"}},
            "memberCreator": {"username": "jdoe", "fullName": "Jane Doe"},
        }
        entry.update(extra)
        return Action.from_dict(entry)

    return _make


@pytest.fixture
def board_factory() -> Callable[..., BoardConfig]:
    """Factory for boards with overridden board-file keys."""
    return board_config

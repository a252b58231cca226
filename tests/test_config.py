"""Tests for configuration management."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from trellord_connector.config import (
    BoardConfig,
    ConfigError,
    Settings,
    TrelloSettings,
    clear_settings_cache,
    get_settings,
    load_boards,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

REQUIRED_ENV = {"TRELLO_API_KEY": "key-123", "TRELLO_TOKEN": "token-456"}


@pytest.fixture(autouse=True)
def clear_cache() -> Iterator[None]:
    """Clear settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


def board_entry(**overrides: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "boardId": "board-1",
        "boardName": "Roadmap",
        "check_interval": 60000,
        "timer_duration": 30000,
        "disableComments": False,
        "discord_configs": {
            "webhookUrl": "https://discord.com/api/webhooks/1/token-1",
            "username": "",
            "avatar_url": "",
        },
    }
    entry.update(overrides)
    return entry


def write_boards(path: Path, boards: list[dict[str, Any]]) -> Path:
    path.write_text(json.dumps({"trellos": boards}), encoding="utf-8")
    return path


class TestTrelloSettings:
    """Tests for TrelloSettings."""

    def test_credentials_from_env(self) -> None:
        """Credentials are read from the environment."""
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            settings = TrelloSettings()
            assert settings.api_key.get_secret_value() == "key-123"
            assert settings.token.get_secret_value() == "token-456"
            assert settings.api_url == "https://api.trello.com/1"

    def test_secrets_hidden_in_repr(self) -> None:
        """Secrets never show up in repr."""
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            settings = TrelloSettings()
            assert "key-123" not in repr(settings)
            assert "token-456" not in repr(settings)

    def test_missing_credentials_raise(self) -> None:
        """Key and token are required."""
        with patch.dict(os.environ, {}, clear=True), pytest.raises(ValidationError):
            TrelloSettings()

    def test_custom_api_url_trailing_slash(self) -> None:
        """The API URL is normalized."""
        with patch.dict(
            os.environ, {**REQUIRED_ENV, "TRELLO_API_URL": "http://localhost:8080/1/"}, clear=True
        ):
            assert TrelloSettings().api_url == "http://localhost:8080/1"

    def test_invalid_api_url_raises(self) -> None:
        """Non-HTTP endpoints are rejected."""
        with (
            patch.dict(os.environ, {**REQUIRED_ENV, "TRELLO_API_URL": "ftp://trello"}, clear=True),
            pytest.raises(ValidationError, match="HTTP"),
        ):
            TrelloSettings()


class TestBoardConfig:
    """Tests for BoardConfig."""

    def test_board_file_keys(self) -> None:
        """Board file keys map onto the model."""
        board = BoardConfig.model_validate(board_entry())

        assert board.board_id == "board-1"
        assert board.board_name == "Roadmap"
        assert board.poll_interval_seconds == 60.0
        assert board.dispatch_interval_seconds == 30.0
        assert board.discord.webhook_url == "https://discord.com/api/webhooks/1/token-1"
        assert board.verbose is True
        assert board.ignored_action_types == frozenset()

    def test_disable_comments_silences_logs(self) -> None:
        """disableComments turns off routine logging."""
        board = BoardConfig.model_validate(board_entry(disableComments=True))
        assert board.verbose is False

    def test_defaults(self) -> None:
        """Intervals default when omitted."""
        entry = board_entry()
        del entry["check_interval"]
        del entry["timer_duration"]
        board = BoardConfig.model_validate(entry)
        assert board.check_interval == 60000
        assert board.timer_duration == 30000

    def test_ignored_types(self) -> None:
        """Ignored action types are a set."""
        board = BoardConfig.model_validate(
            board_entry(ignoredActionTypes=["updateCard", "updateCard", "createList"])
        )
        assert board.ignored_action_types == frozenset({"updateCard", "createList"})

    def test_invalid_interval(self) -> None:
        """Intervals must be positive."""
        with pytest.raises(ValidationError):
            BoardConfig.model_validate(board_entry(check_interval=0))

    def test_missing_webhook(self) -> None:
        """A board needs a webhook."""
        entry = board_entry()
        del entry["discord_configs"]
        with pytest.raises(ValidationError):
            BoardConfig.model_validate(entry)

    def test_invalid_webhook_url(self) -> None:
        """Webhook URLs must be HTTP(S)."""
        with pytest.raises(ValidationError, match="webhookUrl"):
            BoardConfig.model_validate(board_entry(discord_configs={"webhookUrl": "discord"}))

    def test_frozen(self) -> None:
        """Boards are immutable after load."""
        board = BoardConfig.model_validate(board_entry())
        with pytest.raises(ValidationError):
            board.board_name = "Other"  # type: ignore[misc]


class TestLoadBoards:
    """Tests for the board file loader."""

    def test_load(self, tmp_path: Path) -> None:
        """Boards load in file order."""
        path = write_boards(
            tmp_path / "config.json",
            [board_entry(), board_entry(boardId="board-2", boardName="Support")],
        )

        boards = load_boards(path)

        assert [b.board_id for b in boards] == ["board-1", "board-2"]

    def test_missing_file(self, tmp_path: Path) -> None:
        """Unreadable files raise ConfigError."""
        with pytest.raises(ConfigError, match="Cannot read"):
            load_boards(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON is a validation error."""
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_boards(path)

    def test_empty_board_list(self, tmp_path: Path) -> None:
        """At least one board is required."""
        with pytest.raises(ValidationError):
            load_boards(write_boards(tmp_path / "config.json", []))

    def test_duplicate_board_ids(self, tmp_path: Path) -> None:
        """Board ids must be unique."""
        path = write_boards(tmp_path / "config.json", [board_entry(), board_entry()])
        with pytest.raises(ValidationError, match="duplicate boardId"):
            load_boards(path)


class TestSettings:
    """Tests for the main Settings class."""

    def test_defaults(self) -> None:
        """Test default values."""
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            settings = Settings()
            assert settings.config_path == Path("config/config.json")
            assert settings.language == "en"
            assert settings.port == 3000
            assert settings.log_level == "INFO"
            assert settings.dry_run is False
            assert settings.http_timeout == 10.0

    def test_env_overrides(self) -> None:
        """Test values from the environment."""
        env = {
            **REQUIRED_ENV,
            "CONFIG_PATH": "/etc/trellord/boards.json",
            "LANGUAGE": "es",
            "PORT": "8080",
            "LOG_LEVEL": "DEBUG",
            "DRY_RUN": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()
            assert settings.config_path == Path("/etc/trellord/boards.json")
            assert settings.language == "es"
            assert settings.port == 8080
            assert settings.dry_run is True

    def test_unknown_language(self) -> None:
        """Only catalogued languages are accepted."""
        with (
            patch.dict(os.environ, {**REQUIRED_ENV, "LANGUAGE": "xx"}, clear=True),
            pytest.raises(ValidationError, match="LANGUAGE"),
        ):
            Settings()

    def test_invalid_port(self) -> None:
        """Ports must be in range."""
        with (
            patch.dict(os.environ, {**REQUIRED_ENV, "PORT": "70000"}, clear=True),
            pytest.raises(ValidationError),
        ):
            Settings()

    def test_load_boards_from_config_path(self, tmp_path: Path) -> None:
        """Settings point at the board file."""
        path = write_boards(tmp_path / "boards.json", [board_entry()])
        with patch.dict(os.environ, {**REQUIRED_ENV, "CONFIG_PATH": str(path)}, clear=True):
            boards = Settings().load_boards()
            assert boards[0].board_name == "Roadmap"

    def test_redacted_summary(self) -> None:
        """Secrets are not exposed in the summary."""
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            summary = Settings().redacted_summary()
            assert summary["trello_api_key"] == "(set)"
            assert summary["trello_token"] == "(set)"
            assert "key-123" not in str(summary)
            assert "token-456" not in str(summary)

    def test_redact_webhook_url(self) -> None:
        """The webhook token is masked."""
        assert (
            Settings.redact_webhook_url("https://discord.com/api/webhooks/123/secret")
            == "https://discord.com/api/webhooks/123/***"
        )
        assert Settings.redact_webhook_url("https://example.com/hook") == "https://example.com/hook"


class TestGetSettings:
    """Tests for the settings singleton."""

    def test_cached(self) -> None:
        """Test that get_settings returns the cached instance."""
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            assert get_settings() is get_settings()

    def test_clear_cache(self) -> None:
        """Test that clearing the cache reloads the environment."""
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            first = get_settings()
            clear_settings_cache()
            assert get_settings() is not first

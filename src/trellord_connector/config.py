"""Configuration management with Pydantic Settings.

Process-level settings (Trello credentials, HTTP port, language, logging)
come from environment variables or a ``.env`` file. The list of monitored
boards comes from a JSON file, ``config/config.json`` by default, loaded
once at startup and never reloaded.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trellord_connector.relay.strings import AVAILABLE_LANGUAGES


class ConfigError(Exception):
    """Raised when the board configuration file cannot be read."""


class TrelloSettings(BaseSettings):
    """Trello API credentials and endpoint."""

    model_config = SettingsConfigDict(
        env_prefix="TRELLO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr = Field(
        alias="TRELLO_API_KEY",
        description="Trello API key",
    )
    token: SecretStr = Field(
        alias="TRELLO_TOKEN",
        description="Trello API token",
    )
    api_url: str = Field(
        default="https://api.trello.com/1",
        alias="TRELLO_API_URL",
        description="Base URL of the Trello REST API",
    )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate API URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("TRELLO_API_URL must be an HTTP(S) endpoint")
        return v.rstrip("/")


class DiscordWebhookConfig(BaseModel):
    """Destination webhook of one board."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    webhook_url: str = Field(alias="webhookUrl")
    username: str = ""
    avatar_url: str = ""

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: str) -> str:
        """Validate webhook URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("webhookUrl must be an HTTP(S) URL")
        return v


class BoardConfig(BaseModel):
    """One monitored Trello board.

    Intervals are in milliseconds, matching the board file format.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    board_id: str = Field(alias="boardId", min_length=1)
    board_name: str = Field(alias="boardName")
    check_interval: int = Field(default=60_000, gt=0)
    timer_duration: int = Field(default=30_000, gt=0)
    disable_comments: bool = Field(default=False, alias="disableComments")
    ignored_action_types: frozenset[str] = Field(
        default_factory=frozenset,
        alias="ignoredActionTypes",
    )
    discord: DiscordWebhookConfig = Field(alias="discord_configs")

    @property
    def poll_interval_seconds(self) -> float:
        """Seconds between two polls of the board."""
        return self.check_interval / 1000

    @property
    def dispatch_interval_seconds(self) -> float:
        """Seconds between two dispatch runs for the board."""
        return self.timer_duration / 1000

    @property
    def verbose(self) -> bool:
        """Whether routine per-board activity should be logged."""
        return not self.disable_comments


class BoardsFile(BaseModel):
    """Top-level layout of the board configuration file."""

    trellos: list[BoardConfig] = Field(min_length=1)

    @field_validator("trellos")
    @classmethod
    def validate_unique_ids(cls, v: list[BoardConfig]) -> list[BoardConfig]:
        """Reject duplicated board identifiers."""
        seen: set[str] = set()
        for board in v:
            if board.board_id in seen:
                raise ValueError(f"duplicate boardId {board.board_id!r}")
            seen.add(board.board_id)
        return v


def load_boards(path: str | Path) -> list[BoardConfig]:
    """Load board definitions from a JSON file.

    Args:
        path: Location of the board configuration file.

    Returns:
        Board configurations in file order.

    Raises:
        ConfigError: If the file cannot be read.
        ValidationError: If the content is not a valid board file.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read board configuration {path}: {e}") from e
    return BoardsFile.model_validate_json(text).trellos


class Settings(BaseSettings):
    """Main application settings.

    Example:
        ```python
        from trellord_connector.config import get_settings

        settings = get_settings()
        boards = settings.load_boards()
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    trello: TrelloSettings = Field(default_factory=TrelloSettings)

    config_path: Path = Field(
        default=Path("config/config.json"),
        alias="CONFIG_PATH",
        description="Path to the JSON board configuration file",
    )
    language: str = Field(
        default="en",
        alias="LANGUAGE",
        description="Language of the relayed messages",
    )
    port: int = Field(
        default=3000,
        alias="PORT",
        description="HTTP port kept open for health checks",
        ge=1,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    dry_run: bool = Field(
        default=False,
        alias="DRY_RUN",
        description="Log messages instead of posting them to Discord",
    )
    http_timeout: float = Field(
        default=10.0,
        alias="HTTP_TIMEOUT",
        description="Timeout in seconds for outbound HTTP calls",
        gt=0,
    )

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate that a string catalog exists for the language."""
        if v not in AVAILABLE_LANGUAGES:
            raise ValueError(
                f"LANGUAGE must be one of: {', '.join(sorted(AVAILABLE_LANGUAGES))}"
            )
        return v

    def load_boards(self) -> list[BoardConfig]:
        """Load the boards listed in ``config_path``."""
        return load_boards(self.config_path)

    def redacted_summary(self) -> dict[str, str]:
        """Get a summary of settings with secrets redacted."""
        return {
            "trello_api_url": self.trello.api_url,
            "trello_api_key": "(set)" if self.trello.api_key.get_secret_value() else "(empty)",
            "trello_token": "(set)" if self.trello.token.get_secret_value() else "(empty)",
            "config_path": str(self.config_path),
            "language": self.language,
            "port": str(self.port),
            "log_level": self.log_level,
            "dry_run": str(self.dry_run),
        }

    @staticmethod
    def redact_webhook_url(url: str) -> str:
        """Mask the token segment of a Discord webhook URL."""
        base, sep, _token = url.rstrip("/").rpartition("/")
        if not sep or "/webhooks/" not in url:
            return url
        return f"{base}/***"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Raises:
        ValidationError: If required environment variables are missing
            or have invalid values.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()

"""Async client for the Trello board actions endpoint."""

from __future__ import annotations

import logging

import httpx

from trellord_connector.trello.models import Action

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.trello.com/1"
DEFAULT_TIMEOUT = 10.0


class TrelloClientError(Exception):
    """Raised when the Trello API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TrelloClient:
    """Fetches board actions from the Trello REST API.

    Authentication uses a static key/token pair passed as query parameters.
    Requests are made once; there is no retry.
    """

    def __init__(
        self,
        api_key: str,
        token: str,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Trello API key.
            token: Trello API token.
            base_url: Base URL of the REST API.
            timeout: HTTP request timeout in seconds.
        """
        self._api_key = api_key
        self._token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _actions_url(self, board_id: str) -> str:
        return f"{self.base_url}/boards/{board_id}/actions"

    async def get_board_actions(self, board_id: str) -> list[Action]:
        """Fetch the recent actions of a board.

        Entries the API returns without an id, type or valid date are
        skipped with a warning.

        Args:
            board_id: Trello board identifier.

        Returns:
            Actions as listed by the API (newest first).

        Raises:
            TrelloClientError: On transport errors, non-2xx responses or
                an unexpected response body.
        """
        params = {"key": self._api_key, "token": self._token}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self._actions_url(board_id), params=params)
        except httpx.TimeoutException as e:
            raise TrelloClientError(f"Trello request timed out for board {board_id}") from e
        except httpx.HTTPError as e:
            raise TrelloClientError(f"Trello request failed for board {board_id}: {e}") from e

        if not response.is_success:
            raise TrelloClientError(
                f"Trello API returned {response.status_code} for board {board_id}: "
                f"{response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TrelloClientError(f"Trello API returned invalid JSON for board {board_id}") from e

        if not isinstance(payload, list):
            raise TrelloClientError(f"Unexpected Trello response shape for board {board_id}")

        actions: list[Action] = []
        for entry in payload:
            try:
                actions.append(Action.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping unreadable action on board {board_id}: {e!r}")
        return actions

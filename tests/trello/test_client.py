"""Tests for the Trello API client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from trellord_connector.trello.client import TrelloClient, TrelloClientError


@pytest.fixture
def client() -> TrelloClient:
    return TrelloClient("key-1", "token-1", base_url="https://api.trello.test/1/", timeout=3.0)


def mock_http_client(mock_client_class: MagicMock) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.__aenter__.return_value = mock_client
    mock_client.__aexit__.return_value = None
    mock_client_class.return_value = mock_client
    return mock_client


def json_response(body: object, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.is_success = 200 <= status_code < 300
    response.reason_phrase = "OK" if response.is_success else "Unauthorized"
    response.json.return_value = body
    return response


class TestTrelloClient:
    """Tests for TrelloClient.get_board_actions."""

    def test_base_url_normalized(self, client: TrelloClient) -> None:
        """Trailing slashes are dropped."""
        assert client.base_url == "https://api.trello.test/1"

    async def test_fetch_actions(self, client: TrelloClient) -> None:
        """Actions are parsed and credentials sent as query params."""
        body = [
            {"id": "a2", "type": "createCard", "date": "2024-01-01T12:10:00.000Z", "data": {}},
            {"id": "a1", "type": "createList", "date": "2024-01-01T12:05:00.000Z", "data": {}},
        ]

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = mock_http_client(mock_client_class)
            mock_client.get.return_value = json_response(body)

            actions = await client.get_board_actions("board-1")

        assert [a.id for a in actions] == ["a2", "a1"]
        mock_client.get.assert_called_once_with(
            "https://api.trello.test/1/boards/board-1/actions",
            params={"key": "key-1", "token": "token-1"},
        )
        mock_client_class.assert_called_once_with(timeout=3.0)

    async def test_unreadable_entries_skipped(self, client: TrelloClient) -> None:
        """Entries without id or with a bad date are dropped."""
        body = [
            {"type": "createCard", "date": "2024-01-01T12:10:00.000Z"},
            {"id": "a1", "type": "createCard", "date": "not-a-date"},
            {"id": "a2", "type": "createCard", "date": "2024-01-01T12:10:00.000Z"},
        ]

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = mock_http_client(mock_client_class)
            mock_client.get.return_value = json_response(body)

            actions = await client.get_board_actions("board-1")

        assert [a.id for a in actions] == ["a2"]

    async def test_error_status(self, client: TrelloClient) -> None:
        """Non-2xx responses raise with the status code."""
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = mock_http_client(mock_client_class)
            mock_client.get.return_value = json_response("invalid token", status_code=401)

            with pytest.raises(TrelloClientError) as exc_info:
                await client.get_board_actions("board-1")

        assert exc_info.value.status_code == 401

    async def test_unexpected_shape(self, client: TrelloClient) -> None:
        """A non-list body is an error."""
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = mock_http_client(mock_client_class)
            mock_client.get.return_value = json_response({"message": "nope"})

            with pytest.raises(TrelloClientError, match="Unexpected"):
                await client.get_board_actions("board-1")

    async def test_invalid_json(self, client: TrelloClient) -> None:
        """Unparseable bodies are errors."""
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = mock_http_client(mock_client_class)
            response = json_response(None)
            response.json.side_effect = ValueError("bad json")
            mock_client.get.return_value = response

            with pytest.raises(TrelloClientError, match="invalid JSON"):
                await client.get_board_actions("board-1")

    async def test_timeout(self, client: TrelloClient) -> None:
        """Timeouts are wrapped."""
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = mock_http_client(mock_client_class)
            mock_client.get.side_effect = httpx.TimeoutException("slow")

            with pytest.raises(TrelloClientError, match="timed out"):
                await client.get_board_actions("board-1")

    async def test_transport_error(self, client: TrelloClient) -> None:
        """Connection errors are wrapped."""
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = mock_http_client(mock_client_class)
            mock_client.get.side_effect = httpx.ConnectError("refused")

            with pytest.raises(TrelloClientError) as exc_info:
                await client.get_board_actions("board-1")

        assert exc_info.value.status_code is None

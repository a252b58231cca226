"""Webhook payload assembly for relayed notifications.

Wraps a :class:`Notification` into the Discord webhook body: a single rich
embed with the brand footer, plus the per-board sender identity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trellord_connector.config import BoardConfig
    from trellord_connector.relay.models import Notification
    from trellord_connector.trello.models import Action

BRAND = "TrellordConnector"

# Discord embed limits
TITLE_LIMIT = 256
FIELD_NAME_LIMIT = 256
FIELD_VALUE_LIMIT = 1024
DESCRIPTION_LIMIT = 4096


def clip(text: str, limit: int) -> str:
    """Clip text to a Discord length limit."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def sender_username(board: BoardConfig) -> str:
    """Username shown for the board's messages."""
    if board.discord.username:
        return board.discord.username
    return f"{BRAND} | {board.board_name}"


def sender_avatar(board: BoardConfig) -> str | None:
    """Avatar override for the board's messages, if configured."""
    return board.discord.avatar_url or None


def build_embed(notification: Notification, timestamp: str) -> dict[str, Any]:
    """Build the Discord embed for a notification.

    Field order is kept exactly as the notification lists it.
    """
    embed: dict[str, Any] = {
        "title": clip(notification.title, TITLE_LIMIT),
        "description": clip(notification.description, DESCRIPTION_LIMIT),
        "fields": [
            {
                "name": clip(f.name, FIELD_NAME_LIMIT),
                "value": clip(f.value, FIELD_VALUE_LIMIT),
            }
            for f in notification.fields
        ],
        "timestamp": timestamp,
        "footer": {"text": BRAND},
    }
    if notification.url:
        embed["url"] = notification.url
    return embed


def build_webhook_payload(
    notification: Notification,
    action: Action,
    board: BoardConfig,
) -> dict[str, Any]:
    """Build the JSON body posted to the board's webhook.

    Args:
        notification: Classified action content.
        action: The action, for its timestamp.
        board: Board whose sender identity is used.

    Returns:
        Webhook payload dictionary.
    """
    timestamp = action.raw_date or action.date.isoformat()
    return {
        "embeds": [build_embed(notification, timestamp)],
        "username": sender_username(board),
        "avatar_url": sender_avatar(board),
    }

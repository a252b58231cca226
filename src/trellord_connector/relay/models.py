"""Data models for the relay module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class EmbedField:
    """A single name/value pair shown in a Discord embed."""

    name: str
    value: str


@dataclass(frozen=True)
class Notification:
    """Channel-independent content of one relayed action.

    Attributes:
        title: Short headline, usually quoting the card or list name.
        description: Fixed explanatory sentence for the action type.
        url: Deep link to the card or board, if one can be built.
        fields: Extra details in display order.
    """

    title: str
    description: str
    url: str | None = None
    fields: tuple[EmbedField, ...] = ()


@dataclass(frozen=True)
class QueuedMessage:
    """A formatted webhook body waiting for delivery.

    Attributes:
        action_id: Identifier of the Trello action it was built from.
        board_id: Board whose dispatcher delivers it.
        payload: JSON body posted to the webhook.
    """

    action_id: str
    board_id: str
    payload: dict[str, Any] = field(default_factory=dict)

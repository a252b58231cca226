"""Data models for Trello board actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

TRELLO_CARD_URL = "https://trello.com/c/{short_link}"
TRELLO_BOARD_URL = "https://trello.com/b/{short_link}"


class MalformedActionError(Exception):
    """Raised when a recognized action lacks a payload field it needs."""

    def __init__(self, action_id: str, path: str) -> None:
        super().__init__(f"Action {action_id} is missing {path}")
        self.action_id = action_id
        self.path = path


def parse_trello_date(value: str) -> datetime:
    """Parse a Trello ISO-8601 timestamp into an aware datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class Action:
    """An event reported by the Trello board actions endpoint.

    Attributes:
        id: Unique action identifier.
        type: Action type tag such as ``createCard`` or ``updateList``.
        date: When the action happened.
        data: Type-specific payload (card, list, board, old values...).
        member_creator: Member who performed the action.
        member: Member the action refers to, for membership actions.
        raw_date: Timestamp exactly as the API reported it.
    """

    id: str
    type: str
    date: datetime
    data: dict[str, Any] = field(default_factory=dict)
    member_creator: dict[str, Any] = field(default_factory=dict)
    member: dict[str, Any] | None = None
    raw_date: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        """Create an Action from an API response entry.

        Raises:
            KeyError: If ``id``, ``type`` or ``date`` is missing.
            ValueError: If ``date`` is not an ISO-8601 timestamp.
        """
        raw_date = str(data["date"])
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            date=parse_trello_date(raw_date),
            data=data.get("data") or {},
            member_creator=data.get("memberCreator") or {},
            member=data.get("member"),
            raw_date=raw_date,
        )

    def require(self, *path: str) -> Any:
        """Return a nested value, failing loudly when it is absent.

        ``action.require("data", "card", "name")`` walks the action's
        payload. The first segment may be ``data``, ``memberCreator`` or
        ``member``.

        Raises:
            MalformedActionError: If any segment is missing.
        """
        roots: dict[str, Any] = {
            "data": self.data,
            "memberCreator": self.member_creator,
            "member": self.member,
        }
        current: Any = roots.get(path[0])
        for segment in path[1:]:
            if not isinstance(current, dict) or segment not in current:
                current = None
                break
            current = current[segment]
        if current is None:
            raise MalformedActionError(self.id, ".".join(path))
        return current

    @property
    def old(self) -> dict[str, Any]:
        """Previous values of an update action (empty when absent)."""
        old = self.data.get("old")
        return old if isinstance(old, dict) else {}

    @property
    def card(self) -> dict[str, Any]:
        """Card sub-object (empty when absent)."""
        card = self.data.get("card")
        return card if isinstance(card, dict) else {}

    def card_url(self) -> str:
        """Deep link to the action's card."""
        return TRELLO_CARD_URL.format(short_link=self.require("data", "card", "shortLink"))

    def board_url(self) -> str:
        """Deep link to the action's board."""
        return TRELLO_BOARD_URL.format(short_link=self.require("data", "board", "shortLink"))

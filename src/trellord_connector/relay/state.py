"""In-memory relay state: the shared message queue and the dedup ledger.

All state is owned by a :class:`RelayContext` that the poller and the
dispatcher receive explicitly. Nothing here is persisted; a restart starts
from empty collections and a fresh ``server_start``.

Every collection runs on the event loop thread only. Mutations never
await, so a poll and a dispatch interleaving at their network calls
cannot observe a half-applied change.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime

from trellord_connector.relay.models import QueuedMessage

logger = logging.getLogger(__name__)


class MessageQueue:
    """Ordered holding area for messages awaiting delivery.

    Shared by all boards; each dispatcher drains its own board's entries.
    An action identifier is held at most once.
    """

    def __init__(self) -> None:
        self._messages: list[QueuedMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[QueuedMessage]:
        return iter(list(self._messages))

    def contains(self, action_id: str, board_id: str | None = None) -> bool:
        """Check whether an action is queued, optionally for one board."""
        return any(
            m.action_id == action_id and (board_id is None or m.board_id == board_id)
            for m in self._messages
        )

    def enqueue(self, message: QueuedMessage) -> bool:
        """Append a message unless its action is already queued.

        Returns:
            True if the message was added.
        """
        if self.contains(message.action_id):
            logger.debug(f"Action {message.action_id} already queued")
            return False
        self._messages.append(message)
        return True

    def for_board(self, board_id: str) -> list[QueuedMessage]:
        """Snapshot of a board's messages in queue order."""
        return [m for m in self._messages if m.board_id == board_id]

    def count_for_board(self, board_id: str) -> int:
        """Number of messages queued for a board."""
        return sum(1 for m in self._messages if m.board_id == board_id)

    def remove_delivered(self, delivered: set[str] | frozenset[str]) -> int:
        """Drop every message whose action was delivered, for all boards.

        Returns:
            Number of messages removed.
        """
        before = len(self._messages)
        self._messages = [m for m in self._messages if m.action_id not in delivered]
        return before - len(self._messages)


@dataclass
class DedupLedger:
    """Bookkeeping of delivered actions and skipped action types.

    All sets only grow for the lifetime of the process.

    Attributes:
        delivered: Action identifiers successfully delivered.
        unsupported_types: Action types the classifier cannot translate.
        rejected: Action identifiers whose payload could not be classified.
    """

    delivered: set[str] = field(default_factory=set)
    unsupported_types: set[str] = field(default_factory=set)
    rejected: set[str] = field(default_factory=set)

    def is_delivered(self, action_id: str) -> bool:
        """Check whether an action was already delivered."""
        return action_id in self.delivered

    def mark_delivered(self, action_id: str) -> None:
        """Record a successful delivery."""
        self.delivered.add(action_id)

    def is_unsupported(self, action_type: str) -> bool:
        """Check whether an action type is on the skip-list."""
        return action_type in self.unsupported_types

    def mark_unsupported(self, action_type: str) -> bool:
        """Add an action type to the skip-list.

        Returns:
            True if the type was not known before.
        """
        if action_type in self.unsupported_types:
            return False
        self.unsupported_types.add(action_type)
        return True

    def mark_rejected(self, action_id: str) -> None:
        """Record an action whose payload could not be classified."""
        self.rejected.add(action_id)


@dataclass
class RelayContext:
    """State shared by the pollers and dispatchers of all boards.

    Attributes:
        server_start: Actions at or before this instant are never relayed.
        queue: Messages waiting for delivery.
        ledger: Delivered identifiers and skip-lists.
    """

    server_start: datetime = field(default_factory=lambda: datetime.now(UTC))
    queue: MessageQueue = field(default_factory=MessageQueue)
    ledger: DedupLedger = field(default_factory=DedupLedger)

    def sweep_delivered(self) -> int:
        """Remove delivered messages from the queue, across all boards."""
        return self.queue.remove_delivered(self.ledger.delivered)

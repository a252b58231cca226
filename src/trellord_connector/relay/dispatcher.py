"""Delivery of queued messages to each board's webhook."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from trellord_connector.config import BoardConfig
    from trellord_connector.relay.state import RelayContext

logger = logging.getLogger(__name__)


class WebhookChannel(Protocol):
    """Protocol for webhook delivery channels."""

    name: str

    async def send(self, webhook_url: str, payload: dict[str, Any]) -> bool:
        """Deliver a payload. Returns True on success."""
        ...


@dataclass
class DispatchResult:
    """Result of one dispatch run for one board."""

    board_id: str
    delivered: int = 0
    failed: int = 0
    skipped: int = 0
    remaining: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def all_succeeded(self) -> bool:
        """Return True if nothing failed."""
        return self.failed == 0


class MessageDispatcher:
    """Drains a board's queued messages into its webhook.

    Messages are sent one at a time in queue order. Success moves the
    action into the delivered ledger; failure leaves it queued for the next
    run, with no backoff and no attempt limit. Each run ends with a sweep
    that removes every delivered message from the queue, for all boards.
    """

    def __init__(self, channel: WebhookChannel, context: RelayContext) -> None:
        """Initialize the dispatcher.

        Args:
            channel: Channel used to post payloads.
            context: Shared relay state.
        """
        self.channel = channel
        self.context = context
        self._locks: dict[str, asyncio.Lock] = {}

    async def dispatch(self, board: BoardConfig) -> DispatchResult:
        """Deliver the board's queued messages.

        Runs for the same board are serialized, so a message is never in
        flight twice.

        Args:
            board: Board whose messages are sent.

        Returns:
            DispatchResult with delivery counts.
        """
        lock = self._locks.setdefault(board.board_id, asyncio.Lock())
        async with lock:
            return await self._drain(board)

    async def _drain(self, board: BoardConfig) -> DispatchResult:
        if board.verbose:
            logger.info(f"Sending queued messages for board {board.board_name}")

        ledger = self.context.ledger
        result = DispatchResult(board_id=board.board_id)

        for message in self.context.queue.for_board(board.board_id):
            # Delivered outside this run but not yet swept.
            if ledger.is_delivered(message.action_id):
                result.skipped += 1
                continue

            try:
                success = await self.channel.send(board.discord.webhook_url, message.payload)
            except Exception as e:
                logger.error(f"Error sending to {self.channel.name}: {e}")
                success = False

            if success:
                ledger.mark_delivered(message.action_id)
                result.delivered += 1
            else:
                logger.error(
                    f"Delivery failed for action {message.action_id} "
                    f"on board {board.board_name}, keeping it queued"
                )
                result.failed += 1

        self.context.sweep_delivered()
        result.remaining = self.context.queue.count_for_board(board.board_id)

        if result.delivered or result.failed:
            logger.info(
                f"Dispatch for {board.board_name}: {result.delivered} delivered, "
                f"{result.failed} failed"
            )
        return result

"""Per-board polling of Trello actions into the message queue."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trellord_connector.relay.formatter import build_webhook_payload
from trellord_connector.relay.models import QueuedMessage
from trellord_connector.trello.client import TrelloClientError
from trellord_connector.trello.models import MalformedActionError

if TYPE_CHECKING:
    from trellord_connector.config import BoardConfig
    from trellord_connector.relay.classifier import ActionClassifier
    from trellord_connector.relay.state import RelayContext
    from trellord_connector.trello.client import TrelloClient
    from trellord_connector.trello.models import Action

logger = logging.getLogger(__name__)

# Comments are never relayed, whatever the classifier supports.
COMMENT_ACTION_TYPE = "commentCard"


@dataclass
class PollResult:
    """Outcome of one poll of one board."""

    board_id: str
    ok: bool
    fetched: int = 0
    eligible: int = 0
    enqueued: int = 0
    unsupported: int = 0
    rejected: int = 0
    error: str | None = None


class BoardPoller:
    """Fetches a board's actions and queues messages for the new ones.

    An action is eligible when it happened after ``server_start``, is
    neither queued for this board nor delivered, is not a comment, its type
    is neither known-unsupported nor ignored by the board, and its payload
    has not been rejected before.
    """

    def __init__(
        self,
        client: TrelloClient,
        classifier: ActionClassifier,
        context: RelayContext,
    ) -> None:
        """Initialize the poller.

        Args:
            client: Trello API client.
            classifier: Action to notification translator.
            context: Shared relay state.
        """
        self.client = client
        self.classifier = classifier
        self.context = context
        self._locks: dict[str, asyncio.Lock] = {}

    def is_eligible(self, action: Action, board: BoardConfig) -> bool:
        """Check whether an action should be classified."""
        ledger = self.context.ledger
        return (
            action.date > self.context.server_start
            and not self.context.queue.contains(action.id, board.board_id)
            and not ledger.is_delivered(action.id)
            and action.type != COMMENT_ACTION_TYPE
            and not ledger.is_unsupported(action.type)
            and action.type not in board.ignored_action_types
            and action.id not in ledger.rejected
        )

    async def poll(self, board: BoardConfig) -> PollResult:
        """Poll a board once.

        API failures are logged and reported in the result; they never
        raise. Polls of the same board are serialized.

        Args:
            board: Board to poll.

        Returns:
            PollResult describing what happened.
        """
        lock = self._locks.setdefault(board.board_id, asyncio.Lock())
        async with lock:
            return await self._poll(board)

    async def _poll(self, board: BoardConfig) -> PollResult:
        try:
            actions = await self.client.get_board_actions(board.board_id)
        except TrelloClientError as e:
            logger.error(f"Error checking Trello API for board {board.board_name}: {e}")
            return PollResult(board_id=board.board_id, ok=False, error=str(e))

        result = PollResult(board_id=board.board_id, ok=True, fetched=len(actions))
        new_actions = [a for a in actions if self.is_eligible(a, board)]
        result.eligible = len(new_actions)

        if board.verbose:
            logger.info(
                f"Checked board {board.board_name}: {len(new_actions)} new "
                f"of {len(actions)} actions"
            )

        # Oldest first so the queue follows board history.
        for action in sorted(new_actions, key=lambda a: a.date):
            if board.verbose:
                logger.info(f"New action on {board.board_name}: {action.type}")
            self._handle_action(action, board, result)

        return result

    def _handle_action(self, action: Action, board: BoardConfig, result: PollResult) -> None:
        ledger = self.context.ledger
        try:
            notification = self.classifier.classify(action)
        except MalformedActionError as e:
            logger.warning(f"Skipping action on board {board.board_name}: {e}")
            ledger.mark_rejected(action.id)
            result.rejected += 1
            return

        if notification is None:
            if ledger.mark_unsupported(action.type):
                logger.info(f"Action type not supported: {action.type}")
            result.unsupported += 1
            return

        message = QueuedMessage(
            action_id=action.id,
            board_id=board.board_id,
            payload=build_webhook_payload(notification, action, board),
        )
        if self.context.queue.enqueue(message):
            result.enqueued += 1

"""Tests for the message queue and dedup ledger."""

from trellord_connector.relay.models import QueuedMessage
from trellord_connector.relay.state import DedupLedger, MessageQueue, RelayContext


def message(action_id: str, board_id: str = "board-1") -> QueuedMessage:
    return QueuedMessage(action_id=action_id, board_id=board_id, payload={"id": action_id})


class TestMessageQueue:
    """Tests for MessageQueue."""

    def test_enqueue_and_order(self) -> None:
        """Messages come back in insertion order."""
        queue = MessageQueue()
        assert queue.enqueue(message("a1"))
        assert queue.enqueue(message("a2"))
        assert [m.action_id for m in queue.for_board("board-1")] == ["a1", "a2"]
        assert len(queue) == 2

    def test_rejects_duplicate_action_id(self) -> None:
        """The same action id is never queued twice, whatever the board."""
        queue = MessageQueue()
        assert queue.enqueue(message("a1"))
        assert not queue.enqueue(message("a1"))
        assert not queue.enqueue(message("a1", board_id="board-2"))
        assert len(queue) == 1

    def test_contains_scoped_to_board(self) -> None:
        """contains can be restricted to one board."""
        queue = MessageQueue()
        queue.enqueue(message("a1"))
        assert queue.contains("a1")
        assert queue.contains("a1", "board-1")
        assert not queue.contains("a1", "board-2")

    def test_for_board_filters(self) -> None:
        """Each board only sees its own messages."""
        queue = MessageQueue()
        queue.enqueue(message("a1"))
        queue.enqueue(message("b1", board_id="board-2"))
        assert [m.action_id for m in queue.for_board("board-2")] == ["b1"]
        assert queue.count_for_board("board-1") == 1

    def test_remove_delivered_is_global(self) -> None:
        """Delivered ids are swept from every board."""
        queue = MessageQueue()
        queue.enqueue(message("a1"))
        queue.enqueue(message("b1", board_id="board-2"))
        queue.enqueue(message("a2"))

        removed = queue.remove_delivered({"a1", "b1"})

        assert removed == 2
        assert [m.action_id for m in queue] == ["a2"]


class TestDedupLedger:
    """Tests for DedupLedger."""

    def test_delivered(self) -> None:
        """Delivered ids are remembered."""
        ledger = DedupLedger()
        assert not ledger.is_delivered("a1")
        ledger.mark_delivered("a1")
        assert ledger.is_delivered("a1")

    def test_mark_unsupported_reports_new_types(self) -> None:
        """Only the first report of a type is new."""
        ledger = DedupLedger()
        assert ledger.mark_unsupported("unknownFutureType")
        assert not ledger.mark_unsupported("unknownFutureType")
        assert ledger.is_unsupported("unknownFutureType")

    def test_rejected(self) -> None:
        """Rejected ids are remembered."""
        ledger = DedupLedger()
        ledger.mark_rejected("a1")
        assert "a1" in ledger.rejected


class TestRelayContext:
    """Tests for RelayContext."""

    def test_sweep_delivered(self) -> None:
        """The sweep uses the ledger's delivered set."""
        context = RelayContext()
        context.queue.enqueue(message("a1"))
        context.queue.enqueue(message("a2"))
        context.ledger.mark_delivered("a1")

        assert context.sweep_delivered() == 1
        assert not context.queue.contains("a1")
        assert context.queue.contains("a2")

    def test_server_start_is_aware(self) -> None:
        """The default start instant carries a timezone."""
        assert RelayContext().server_start.tzinfo is not None

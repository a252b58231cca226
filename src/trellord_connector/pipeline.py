"""Relay pipeline wiring and per-board timers.

Every board gets two independent periodic tasks, one polling Trello and
one dispatching queued messages, plus a single poll-then-dispatch run at
startup. All tasks share one :class:`RelayContext` on one event loop.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Coroutine
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from trellord_connector.health import HealthMonitor
from trellord_connector.relay.classifier import ActionClassifier
from trellord_connector.relay.dispatcher import MessageDispatcher, WebhookChannel
from trellord_connector.relay.poller import BoardPoller, PollResult
from trellord_connector.relay.state import RelayContext
from trellord_connector.relay.strings import get_catalog
from trellord_connector.relay.webhook import DiscordWebhook, DryRunWebhook
from trellord_connector.trello.client import TrelloClient

if TYPE_CHECKING:
    from trellord_connector.config import BoardConfig, Settings
    from trellord_connector.relay.dispatcher import DispatchResult

logger = logging.getLogger(__name__)

Tick = Callable[["BoardConfig"], Awaitable[object]]


class Pipeline:
    """Runs the pollers and dispatchers of all configured boards.

    Example:
        ```python
        pipeline = Pipeline(settings, settings.load_boards())
        await pipeline.start()
        ...
        await pipeline.stop()
        ```
    """

    def __init__(
        self,
        settings: Settings,
        boards: list[BoardConfig],
        *,
        dry_run: bool = False,
        client: TrelloClient | None = None,
        channel: WebhookChannel | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Application settings.
            boards: Boards to monitor.
            dry_run: Log messages instead of posting them.
            client: Trello client override.
            channel: Webhook channel override.
        """
        self.settings = settings
        self.boards = boards
        self.dry_run = dry_run

        self.context = RelayContext()
        self.client = client or TrelloClient(
            settings.trello.api_key.get_secret_value(),
            settings.trello.token.get_secret_value(),
            base_url=settings.trello.api_url,
            timeout=settings.http_timeout,
        )
        if channel is None:
            channel = DryRunWebhook() if dry_run else DiscordWebhook(timeout=settings.http_timeout)

        self.poller = BoardPoller(
            self.client,
            ActionClassifier(get_catalog(settings.language)),
            self.context,
        )
        self.dispatcher = MessageDispatcher(channel, self.context)
        self.monitor = HealthMonitor(self.context, boards)

        self._tasks: list[asyncio.Task[None]] = []
        self._stop_event = asyncio.Event()
        self._running = False

    @property
    def is_running(self) -> bool:
        """Return True while the timers are active."""
        return self._running

    async def poll_board(self, board: BoardConfig) -> PollResult:
        """Poll one board and record the outcome."""
        result = await self.poller.poll(board)
        self.monitor.record_poll(board, result)
        return result

    async def dispatch_board(self, board: BoardConfig) -> DispatchResult:
        """Dispatch one board's messages and record the outcome."""
        result = await self.dispatcher.dispatch(board)
        self.monitor.record_dispatch(board, result)
        return result

    async def start(self, *, serve_http: bool = True) -> None:
        """Capture the start instant and launch every board's timers.

        Args:
            serve_http: Open the health HTTP port.
        """
        if self._running:
            logger.warning("Pipeline already running")
            return

        self._stop_event.clear()
        if serve_http:
            await self.monitor.start_http_server(self.settings.port)

        self.context.server_start = datetime.now(UTC)
        self._running = True

        for board in self.boards:
            self._spawn(self._initial_run(board), f"initial:{board.board_id}")
            self._spawn(
                self._run_periodic(board, board.poll_interval_seconds, self.poll_board),
                f"poll:{board.board_id}",
            )
            self._spawn(
                self._run_periodic(board, board.dispatch_interval_seconds, self.dispatch_board),
                f"dispatch:{board.board_id}",
            )

        logger.info(
            f"Relay started at {self.context.server_start.isoformat()} "
            f"for {len(self.boards)} board(s)"
        )

    async def stop(self) -> None:
        """Cancel all timers and close the HTTP server.

        In-flight Trello or webhook calls are dropped.
        """
        if not self._running:
            return

        self._running = False
        self._stop_event.set()

        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks.clear()

        await self.monitor.stop_http_server()
        logger.info("Relay stopped")

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> None:
        self._tasks.append(asyncio.create_task(coro, name=name))

    async def _initial_run(self, board: BoardConfig) -> None:
        """Poll then dispatch once, right after startup."""
        try:
            await self.poll_board(board)
            await self.dispatch_board(board)
        except Exception as e:
            logger.exception(f"Initial run failed for board {board.board_name}: {e}")

    async def _run_periodic(self, board: BoardConfig, interval: float, tick: Tick) -> None:
        """Run ``tick`` every ``interval`` seconds until stopped."""
        while not self._stop_event.is_set():
            try:
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
                    break
                except TimeoutError:
                    pass

                await tick(board)

            except asyncio.CancelledError:
                break
            except Exception as e:
                # Keep the timer alive; the next tick tries again.
                logger.exception(f"Timer error for board {board.board_name}: {e}")

"""Relay health tracking with metrics and HTTP endpoints.

The HTTP server also keeps the process listening on its configured port.
"""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from aiohttp import web
from prometheus_client import Counter, Gauge, generate_latest

if TYPE_CHECKING:
    from trellord_connector.config import BoardConfig
    from trellord_connector.relay.dispatcher import DispatchResult
    from trellord_connector.relay.poller import PollResult
    from trellord_connector.relay.state import RelayContext

logger = logging.getLogger(__name__)

DEFAULT_HTTP_PORT = 3000


class HealthStatus(Enum):
    """Overall health status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class BoardHealth:
    """Health of one monitored board."""

    board_id: str
    board_name: str
    last_poll_time: float | None = None
    last_poll_ok: bool | None = None
    last_dispatch_time: float | None = None
    polls: int = 0
    poll_failures: int = 0
    delivered: int = 0
    delivery_failures: int = 0
    last_error: str | None = None


@dataclass
class HealthReport:
    """Health report for all boards."""

    status: HealthStatus
    boards: dict[str, BoardHealth] = field(default_factory=dict)
    queue_depth: int = 0
    delivered_total: int = 0
    unsupported_types: list[str] = field(default_factory=list)
    uptime_seconds: float = 0.0
    timestamp: float = field(default_factory=time.time)


# Prometheus metrics
POLLS_TOTAL = Counter(
    "trellord_polls_total",
    "Board polls by outcome",
    ["board", "outcome"],
)

ACTIONS_FETCHED = Counter(
    "trellord_actions_fetched_total",
    "Actions returned by the Trello API",
    ["board"],
)

MESSAGES_QUEUED = Counter(
    "trellord_messages_queued_total",
    "Messages added to the delivery queue",
    ["board"],
)

MESSAGES_DELIVERED = Counter(
    "trellord_messages_delivered_total",
    "Messages delivered to Discord",
    ["board"],
)

DELIVERY_FAILURES = Counter(
    "trellord_delivery_failures_total",
    "Failed webhook deliveries",
    ["board"],
)

QUEUE_DEPTH = Gauge(
    "trellord_queue_depth",
    "Messages waiting for delivery",
)

UNSUPPORTED_TYPES = Gauge(
    "trellord_unsupported_action_types",
    "Distinct action types skipped as unsupported",
)

HEALTH_STATUS = Gauge(
    "trellord_health_status",
    "Overall health status (1=healthy, 0.5=degraded, 0=unhealthy)",
)


class HealthMonitor:
    """Tracks poll and dispatch outcomes per board and serves them.

    Example:
        ```python
        monitor = HealthMonitor(context, boards)
        await monitor.start_http_server(port=3000)

        monitor.record_poll(board, poll_result)
        report = monitor.get_health_report()

        await monitor.stop_http_server()
        ```
    """

    def __init__(self, context: RelayContext, boards: list[BoardConfig]) -> None:
        """Initialize the monitor.

        Args:
            context: Shared relay state, read for queue and ledger sizes.
            boards: Boards to report on.
        """
        self._context = context
        self._boards: dict[str, BoardHealth] = {
            b.board_id: BoardHealth(board_id=b.board_id, board_name=b.board_name)
            for b in boards
        }
        self._start_time = time.time()

        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None

    def record_poll(self, board: BoardConfig, result: PollResult) -> None:
        """Record the outcome of a poll."""
        health = self._board(board)
        health.polls += 1
        health.last_poll_time = time.time()
        health.last_poll_ok = result.ok

        if result.ok:
            POLLS_TOTAL.labels(board=board.board_id, outcome="ok").inc()
            ACTIONS_FETCHED.labels(board=board.board_id).inc(result.fetched)
            MESSAGES_QUEUED.labels(board=board.board_id).inc(result.enqueued)
        else:
            health.poll_failures += 1
            health.last_error = result.error
            POLLS_TOTAL.labels(board=board.board_id, outcome="error").inc()

        self._update_gauges()

    def record_dispatch(self, board: BoardConfig, result: DispatchResult) -> None:
        """Record the outcome of a dispatch run."""
        health = self._board(board)
        health.last_dispatch_time = time.time()
        health.delivered += result.delivered
        health.delivery_failures += result.failed

        MESSAGES_DELIVERED.labels(board=board.board_id).inc(result.delivered)
        DELIVERY_FAILURES.labels(board=board.board_id).inc(result.failed)
        self._update_gauges()

    def _board(self, board: BoardConfig) -> BoardHealth:
        if board.board_id not in self._boards:
            self._boards[board.board_id] = BoardHealth(
                board_id=board.board_id, board_name=board.board_name
            )
        return self._boards[board.board_id]

    def _update_gauges(self) -> None:
        QUEUE_DEPTH.set(len(self._context.queue))
        UNSUPPORTED_TYPES.set(len(self._context.ledger.unsupported_types))

    def _determine_overall_status(self) -> HealthStatus:
        """Unhealthy when every polled board is failing, degraded when some are."""
        outcomes = [b.last_poll_ok for b in self._boards.values() if b.last_poll_ok is not None]
        if not outcomes or all(outcomes):
            return HealthStatus.HEALTHY
        if not any(outcomes):
            return HealthStatus.UNHEALTHY
        return HealthStatus.DEGRADED

    def get_health_report(self) -> HealthReport:
        """Generate a health report."""
        status = self._determine_overall_status()
        HEALTH_STATUS.set(
            1.0 if status == HealthStatus.HEALTHY
            else 0.5 if status == HealthStatus.DEGRADED
            else 0.0
        )
        self._update_gauges()

        return HealthReport(
            status=status,
            boards={board_id: copy.copy(b) for board_id, b in self._boards.items()},
            queue_depth=len(self._context.queue),
            delivered_total=len(self._context.ledger.delivered),
            unsupported_types=sorted(self._context.ledger.unsupported_types),
            uptime_seconds=time.time() - self._start_time,
        )

    # HTTP Server methods

    async def _handle_health(self, _request: web.Request) -> web.Response:
        """Handle /health endpoint."""
        report = self.get_health_report()
        status_code = 503 if report.status == HealthStatus.UNHEALTHY else 200

        body: dict[str, Any] = {
            "status": report.status.value,
            "uptime_seconds": round(report.uptime_seconds, 1),
            "queue_depth": report.queue_depth,
            "delivered_total": report.delivered_total,
            "unsupported_types": report.unsupported_types,
            "boards": {},
        }
        for board_id, board in report.boards.items():
            body["boards"][board_id] = {
                "name": board.board_name,
                "last_poll_time": board.last_poll_time,
                "last_poll_ok": board.last_poll_ok,
                "last_dispatch_time": board.last_dispatch_time,
                "polls": board.polls,
                "poll_failures": board.poll_failures,
                "delivered": board.delivered,
                "delivery_failures": board.delivery_failures,
                "last_error": board.last_error,
            }

        return web.json_response(body, status=status_code)

    async def _handle_metrics(self, _request: web.Request) -> web.Response:
        """Handle /metrics endpoint (Prometheus format)."""
        self.get_health_report()
        return web.Response(
            body=generate_latest(),
            content_type="text/plain",
            charset="utf-8",
        )

    async def _handle_live(self, _request: web.Request) -> web.Response:
        """Handle /live endpoint."""
        return web.json_response({"live": True}, status=200)

    def create_app(self) -> web.Application:
        """Create the aiohttp application."""
        app = web.Application()
        app.router.add_get("/health", self._handle_health)
        app.router.add_get("/metrics", self._handle_metrics)
        app.router.add_get("/live", self._handle_live)
        return app

    async def start_http_server(self, port: int = DEFAULT_HTTP_PORT) -> None:
        """Start the HTTP server.

        Args:
            port: Port to listen on.
        """
        if self._runner:
            logger.warning("HTTP server already running")
            return

        self._app = self.create_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(self._runner, "0.0.0.0", port)
        await site.start()

        logger.info("HTTP server listening on port %d", port)

    async def stop_http_server(self) -> None:
        """Stop the HTTP server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._app = None
            logger.info("HTTP server stopped")

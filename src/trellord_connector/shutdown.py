"""Signal handling for stopping the relay.

Usage:
    ```python
    async with GracefulShutdown() as shutdown:
        shutdown.register_cleanup(pipeline.stop)
        await pipeline.start()
        await shutdown.wait()
    ```
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from collections.abc import Callable
from contextlib import suppress
from types import FrameType
from typing import Any

logger = logging.getLogger(__name__)

# Signals that stop the relay
SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class GracefulShutdown:
    """Turns SIGTERM/SIGINT into an awaitable stop request.

    A second signal while stopping exits immediately. Cleanup callbacks
    (sync or async) run when the context manager exits.
    """

    def __init__(self) -> None:
        self._event: asyncio.Event | None = None
        self._requested = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous_handlers: dict[signal.Signals, Any] = {}
        self._cleanups: list[Callable[[], Any]] = []

    @property
    def is_shutdown_requested(self) -> bool:
        """Check if a stop has been requested."""
        return self._requested

    def register_cleanup(self, callback: Callable[[], Any]) -> None:
        """Register a callable to run on exit."""
        self._cleanups.append(callback)

    def request_shutdown(self) -> None:
        """Request a stop from application code."""
        if self._requested:
            return
        self._requested = True
        logger.info("Shutdown requested")
        if self._event:
            self._event.set()

    async def wait(self) -> None:
        """Block until a stop is requested."""
        if self._event is None:
            self._event = asyncio.Event()
            if self._requested:
                self._event.set()
        await self._event.wait()

    def install_signal_handlers(self) -> None:
        """Route shutdown signals to :meth:`_on_signal`."""
        self._loop = asyncio.get_running_loop()
        if self._event is None:
            self._event = asyncio.Event()

        for sig in SHUTDOWN_SIGNALS:
            try:
                if sys.platform == "win32":
                    self._previous_handlers[sig] = signal.signal(sig, self._on_signal_sync)
                else:
                    self._loop.add_signal_handler(sig, self._on_signal, sig)
            except (ValueError, OSError, NotImplementedError) as e:
                logger.warning("Could not install handler for %s: %s", sig.name, e)

    def remove_signal_handlers(self) -> None:
        """Restore the previous signal handling."""
        if sys.platform == "win32":
            for sig, previous in self._previous_handlers.items():
                with suppress(ValueError, OSError):
                    signal.signal(sig, previous)
            self._previous_handlers.clear()
        elif self._loop is not None:
            for sig in SHUTDOWN_SIGNALS:
                with suppress(ValueError, OSError, NotImplementedError):
                    self._loop.remove_signal_handler(sig)

    def _on_signal(self, sig: signal.Signals) -> None:
        if self._requested:
            logger.warning("Received %s again - exiting now", sig.name)
            sys.exit(128 + sig.value)
        logger.info("Received %s - stopping relay...", sig.name)
        self.request_shutdown()

    def _on_signal_sync(self, sig: int, _frame: FrameType | None) -> None:
        self._on_signal(signal.Signals(sig))

    async def run_cleanup_callbacks(self) -> None:
        """Run the registered cleanup callbacks, logging their failures."""
        for callback in self._cleanups:
            try:
                result = callback()
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error("Cleanup callback failed: %s", e)

    async def __aenter__(self) -> GracefulShutdown:
        self.install_signal_handlers()
        return self

    async def __aexit__(self, *_args: Any) -> None:
        self.remove_signal_handlers()
        await self.run_cleanup_callbacks()

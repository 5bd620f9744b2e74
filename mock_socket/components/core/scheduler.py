"""
Deferred callback scheduling.

Every simulated network event (handshake result, client-to-server message)
runs after the synchronous turn that triggered it, so code that creates a
socket can still attach its handlers before anything fires. Only the
ordering matters, never the delay value.

Two strategies:
- AsyncioScheduler: real deferral on the running event loop.
- ManualScheduler: queue drained explicitly, for synchronous tests.

Scheduled callbacks are never revoked. A socket closed before its handshake
callback fires still runs it.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable

from mock_socket.config.logging import get_logger
from mock_socket.config.settings import settings

logger = get_logger(__name__)

Callback = Callable[[], object]


class Scheduler(ABC):
    """
    Abstract base class for deferred-callback strategies.

    PATTERN: Strategy - sockets depend on this interface only.
    """

    @abstractmethod
    def call_later(self, callback: Callback) -> None:
        """Run callback once the current synchronous turn has finished."""


class AsyncioScheduler(Scheduler):
    """
    Defers callbacks on the running asyncio event loop.

    Usage:
        scheduler = AsyncioScheduler()
        socket = WebSocket("ws://localhost:8080", scheduler=scheduler)
        socket.onopen = on_open
        await asyncio.sleep(scheduler.delay * 2)
    """

    def __init__(self, delay: float | None = None) -> None:
        self.delay = settings.connect_delay if delay is None else delay

    def call_later(self, callback: Callback) -> None:
        # Raises RuntimeError when called outside a running loop
        loop = asyncio.get_running_loop()
        loop.call_later(self.delay, callback)

    async def settle(self, turns: int = 2) -> None:
        """Sleep long enough for callbacks scheduled so far (and the ones they schedule) to run."""
        await asyncio.sleep(self.delay * (turns + 1))


class ManualScheduler(Scheduler):
    """
    Queues callbacks until run_pending() is called.

    Lets plain synchronous tests step through the handshake:

        scheduler = ManualScheduler()
        socket = WebSocket("ws://localhost", scheduler=scheduler)
        socket.onopen = on_open
        scheduler.run_pending()
    """

    def __init__(self, max_callbacks: int | None = None) -> None:
        self._queue: deque[Callback] = deque()
        self._max_callbacks = (
            settings.max_pending_callbacks if max_callbacks is None else max_callbacks
        )

    def call_later(self, callback: Callback) -> None:
        self._queue.append(callback)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return len(self._queue)

    def run_pending(self) -> int:
        """
        Run queued callbacks in FIFO order until the queue is empty.

        Callbacks queued while draining run in the same call. Listener
        exceptions propagate; callbacks after the failing one stay queued.

        Returns:
            Number of callbacks executed.

        Raises:
            RuntimeError: If more than max_callbacks run in one drain
                (a callback keeps rescheduling itself).
        """
        executed = 0
        while self._queue:
            if executed >= self._max_callbacks:
                logger.warning(
                    "Scheduler drain limit reached",
                    executed=executed,
                    remaining=len(self._queue),
                )
                raise RuntimeError(
                    f"ManualScheduler ran {executed} callbacks without draining its queue"
                )
            callback = self._queue.popleft()
            executed += 1
            callback()
        return executed

    def clear(self) -> None:
        """Drop every queued callback without running it."""
        self._queue.clear()

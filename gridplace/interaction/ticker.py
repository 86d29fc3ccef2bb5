"""
Animation tickers.

A ticker calls a single callback at a steady rate while it runs. The
interaction controller starts one when a drag or resize begins and stops
it the moment the pointer is released.

- ManualTicker: fires only when the host calls `fire()`; for hosts that
  already own a frame loop, and for tests.
- AsyncioTicker: schedules itself on the running asyncio event loop.
"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class Ticker:
    """Base ticker. Subclasses decide when the callback fires."""

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback):
        """Start calling `callback` on every tick. Restarts if running."""
        self._callback = callback

    def stop(self):
        """Stop ticking. Safe to call when already stopped."""
        self._callback = None

    def _tick(self):
        if self._callback is None:
            return
        self.ticks += 1
        self._callback()


class ManualTicker(Ticker):
    """Ticker driven by explicit `fire()` calls."""

    def fire(self, count: int = 1) -> int:
        """
        Fire up to `count` ticks.

        Returns:
            Number of ticks actually delivered (0 when stopped)
        """
        fired = 0
        for _ in range(count):
            if not self.running:
                break
            self._tick()
            fired += 1
        return fired


class AsyncioTicker(Ticker):
    """Ticker running as a task on the current asyncio event loop."""

    def __init__(self, interval: float = 1.0 / 60.0):
        """
        Args:
            interval: Seconds between ticks
        """
        super().__init__()
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    def start(self, callback: TickCallback):
        """Start ticking. Must be called from inside a running event loop."""
        self.stop()
        loop = asyncio.get_running_loop()
        super().start(callback)
        self._task = loop.create_task(self._run())

    def stop(self):
        super().stop()
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self):
        while self.running:
            await asyncio.sleep(self.interval)
            try:
                self._tick()
            except Exception:
                logger.exception("Tick callback failed, stopping ticker")
                super().stop()
                self._task = None

"""Owned periodic task."""

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Runs an async callback at a fixed interval until stopped.

    Exceptions raised by the callback are logged and the loop keeps ticking.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval: float,
        name: str = "periodic-task",
    ) -> None:
        """
        Initialize the periodic task.

        Args:
            callback: Coroutine function awaited on each tick.
            interval: Seconds between two ticks. The first tick happens one
                interval after start().
            name: Task name, used in logs.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._callback = callback
        self._interval = interval
        self._name = name
        self._task: asyncio.Task | None = None
        self._tick_count = 0

    @property
    def is_running(self) -> bool:
        """Check if the ticker task is alive."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running event loop."""
        if self.is_running:
            logger.warning(f"[{self._name}] Already running, start ignored")
            return
        self._task = asyncio.create_task(self._run(), name=self._name)
        logger.info(f"[{self._name}] Started with interval {self._interval}s")

    async def stop(self) -> None:
        """Cancel the ticker and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"[{self._name}] Stopped after {self._tick_count} ticks")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._tick_count += 1
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"[{self._name}] Tick {self._tick_count} failed: {e}", exc_info=True)

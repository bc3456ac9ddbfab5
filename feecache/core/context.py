"""Serialized execution context for fee cache state."""

import asyncio
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class ServiceContext:
    """
    Single-consumer job queue running on the event loop.

    Jobs submitted to the context run one at a time, strictly in submission
    order. Jobs may be plain callables or coroutine functions; a coroutine job
    holds the context until it finishes, so long waits (network round trips)
    must happen outside of it.
    """

    def __init__(self, name: str = "service-context") -> None:
        """
        Initialize the service context.

        Args:
            name: Name of the worker task, used in logs.
        """
        self._name = name
        self._queue: asyncio.Queue[tuple[Callable[..., Any], tuple]] | None = None
        self._worker: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """Check if the worker task is alive."""
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        """Start the worker task on the running event loop."""
        if self.is_running:
            return
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._run(), name=self._name)
        logger.debug(f"[{self._name}] Worker started")

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        """
        Queue a job.

        Exceptions raised by the job are logged with traceback and the worker
        moves on to the next job.

        Raises:
            RuntimeError: If the context is not running.
        """
        if not self.is_running:
            raise RuntimeError(f"{self._name} is not running")
        self._queue.put_nowait((fn, args))

    async def stop(self) -> None:
        """Stop the worker and drop jobs that have not run yet."""
        if self._worker is None:
            return

        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass

        pending = self._queue.qsize() if self._queue is not None else 0
        self._queue = None
        self._worker = None
        logger.debug(f"[{self._name}] Worker stopped ({pending} pending jobs dropped)")

    async def _run(self) -> None:
        while True:
            fn, args = await self._queue.get()
            try:
                result = fn(*args)
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"[{self._name}] Job {fn!r} failed: {e}", exc_info=True)
            finally:
                self._queue.task_done()

"""Single-worker FIFO queue that spaces out outbound provider calls."""

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Task = Callable[[], Awaitable[Any]]


class SerialRequestQueue:
    """Runs queued tasks one at a time, sleeping a fixed delay after each.

    The backlog is unbounded; under sustained load latency grows with it.
    """

    def __init__(
        self,
        delay_ms: int = 2000,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delay_ms = delay_ms
        self._sleep = sleep
        self._entries: deque[tuple[Task, asyncio.Future]] = deque()
        self._processing = False
        self._worker: asyncio.Task | None = None

    @property
    def pending(self) -> int:
        return len(self._entries)

    @property
    def processing(self) -> bool:
        return self._processing

    def enqueue(self, task: Task) -> asyncio.Future:
        """Queue task and return a future resolved with its result."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._entries.append((task, future))
        if not self._processing:
            self._processing = True
            self._worker = loop.create_task(self._drain())
        return future

    async def close(self) -> None:
        """Stop the worker and cancel everything still waiting in the queue."""
        worker = self._worker
        if worker is not None and not worker.done():
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass
        while self._entries:
            _, future = self._entries.popleft()
            future.cancel()
        self._processing = False
        self._worker = None

    async def _drain(self) -> None:
        try:
            while self._entries:
                task, future = self._entries.popleft()
                try:
                    result = await task()
                except asyncio.CancelledError:
                    future.cancel()
                    raise
                except Exception as e:
                    logger.error(f"Queue processing error: {e}")
                    if not future.done():
                        future.set_exception(e)
                else:
                    if not future.done():
                        future.set_result(result)
                await self._sleep(self.delay_ms / 1000)
        finally:
            self._processing = False

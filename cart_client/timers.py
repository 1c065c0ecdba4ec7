"""Cancellable debounce timer for async callbacks"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Runs an async callback once a quiet period has passed.

    Every ``schedule()`` restarts the window. The callback reads whatever
    state exists when it fires, so a burst of calls results in one run that
    sees the final state.
    """

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]):
        self.delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        """Start or restart the quiet period"""
        loop = asyncio.get_running_loop()
        if self._handle:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop a pending run; a run already in flight is left to finish"""
        if self._handle:
            self._handle.cancel()
            self._handle = None

    async def wait(self) -> None:
        """Wait for a fired callback that is still running"""
        if self._task and not self._task.done():
            await self._task

    def _fire(self) -> None:
        self._handle = None
        self._task = asyncio.ensure_future(self._callback())
        self._task.add_done_callback(self._log_failure)

    @staticmethod
    def _log_failure(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception():
            logger.error(f"Debounced callback failed: {task.exception()}")

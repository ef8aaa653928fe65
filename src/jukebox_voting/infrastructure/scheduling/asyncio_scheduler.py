"""Scheduler backed by the running asyncio event loop."""

from __future__ import annotations

import asyncio
import logging

from ...application.interfaces.scheduler import ScheduledCallback, ScheduledHandle, Scheduler
from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class AsyncioScheduledHandle(ScheduledHandle):
    def __init__(self, name: str, timer: asyncio.TimerHandle) -> None:
        self.name = name
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._timer.cancelled()

    @property
    def when(self) -> float:
        return self._timer.when()


class AsyncioScheduler(Scheduler):
    """Runs callbacks via ``loop.call_later``.

    Coroutine callbacks run as tasks owned by the scheduler; their failures
    are logged and never reach the code that scheduled them.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def call_later(
        self, delay_seconds: float, callback: ScheduledCallback, *, name: str
    ) -> ScheduledHandle:
        loop = self._loop or asyncio.get_running_loop()
        timer = loop.call_later(max(0.0, delay_seconds), self._fire, name, callback)
        logger.debug(LogTemplates.SCHEDULED, name, delay_seconds)
        return AsyncioScheduledHandle(name, timer)

    def _fire(self, name: str, callback: ScheduledCallback) -> None:
        try:
            result = callback()
        except Exception:
            logger.exception(LogTemplates.SCHEDULED_CALLBACK_FAILED, name)
            return

        if asyncio.iscoroutine(result):
            loop = self._loop or asyncio.get_running_loop()
            task = loop.create_task(result, name=name)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                LogTemplates.SCHEDULED_CALLBACK_FAILED, task.get_name(), exc_info=exc
            )

    async def close(self) -> None:
        """Cancel callbacks that are already running."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

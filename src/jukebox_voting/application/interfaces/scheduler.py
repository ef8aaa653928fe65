"""Port interface for deferred callbacks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

ScheduledCallback = Callable[[], Awaitable[None] | None]


class ScheduledHandle(ABC):
    """A named callback waiting to run."""

    name: str

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class Scheduler(ABC):
    """Runs callbacks after a delay without blocking the caller."""

    @abstractmethod
    def call_later(
        self, delay_seconds: float, callback: ScheduledCallback, *, name: str
    ) -> ScheduledHandle:
        """Run ``callback`` once after ``delay_seconds``.

        Coroutine callbacks are awaited by the scheduler, not by the caller.
        """
        ...

"""Port interfaces for reading and changing the playback queue."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.tracks.value_objects import QueueItem


class QueueSnapshot(ABC):
    """Read side of the live playback queue.

    Every call returns fresh data; nothing is cached between calls.
    """

    @abstractmethod
    async def get_queue(self) -> list[QueueItem]:
        """Get every queued track with its current slot index."""
        ...

    @abstractmethod
    async def get_current_track(self) -> QueueItem | None:
        """Get the track that is playing now, or None when idle."""
        ...


class QueueActuator(ABC):
    """Write side of the live playback queue. Any method may raise."""

    @abstractmethod
    async def skip(self) -> None:
        """Advance to the next track."""
        ...

    @abstractmethod
    async def reorder(self, slot: int, destination: int) -> None:
        """Move the track at ``slot`` so it sits at ``destination``."""
        ...

    @abstractmethod
    async def flush(self) -> None:
        """Remove every track from the queue."""
        ...

    @abstractmethod
    async def insert_after_current(self, uri: str) -> None:
        """Queue ``uri`` directly after the current track."""
        ...

    @abstractmethod
    async def remove(self, slot: int) -> None:
        """Remove the track at ``slot``."""
        ...

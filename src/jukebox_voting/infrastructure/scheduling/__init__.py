"""Timer adapters."""

from jukebox_voting.infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler

__all__ = ["AsyncioScheduler"]

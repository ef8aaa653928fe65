"""Infrastructure layer - default adapters for the voting engine's ports.

This layer contains implementations for:
- Scheduling (asyncio event loop timers)
- User action logging (standard logging)
"""

from jukebox_voting.infrastructure.action_log import LoggingUserActionLog
from jukebox_voting.infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler

__all__ = [
    "AsyncioScheduler",
    "LoggingUserActionLog",
]

"""Skip a gonged track by playing a short filler in front of the next one."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import ActuatorFailureError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import FanfareSettings
    from ..interfaces.queue import QueueActuator, QueueSnapshot
    from ..interfaces.scheduler import Scheduler

logger = logging.getLogger(__name__)

FILLER_REMOVAL_TASK = "gong-filler-removal"


class GongFanfare:
    """Inserts the filler after the current track, advances into it, then
    removes it again once it has had time to play.

    The removal is scheduled fire-and-forget and cannot be cancelled; if it
    fails it is logged and not retried.
    """

    def __init__(
        self,
        *,
        queue_snapshot: QueueSnapshot,
        queue_actuator: QueueActuator,
        scheduler: Scheduler,
        settings: FanfareSettings,
    ) -> None:
        self._queue_snapshot = queue_snapshot
        self._queue_actuator = queue_actuator
        self._scheduler = scheduler
        self._settings = settings

    async def skip_with_fanfare(self) -> None:
        """Skip the current track.

        Raises:
            ActuatorFailureError: If neither the filler route nor a plain skip worked.
        """
        inserted = False
        try:
            await self._queue_actuator.insert_after_current(self._settings.filler_uri)
            inserted = True
            logger.info(LogTemplates.FANFARE_QUEUED, self._settings.filler_uri)
            await self._queue_actuator.skip()
        except Exception as e:
            logger.warning(LogTemplates.FANFARE_FALLBACK, e)
            try:
                await self._queue_actuator.skip()
            except Exception as skip_error:
                logger.exception(LogTemplates.ACTUATOR_FAILED, "skip")
                raise ActuatorFailureError("skip", skip_error) from skip_error
            finally:
                if inserted:
                    self._schedule_removal()
            return

        self._schedule_removal()

    def _schedule_removal(self) -> None:
        # The filler stays in the queue until this runs.
        self._scheduler.call_later(
            self._settings.filler_duration_seconds,
            self.remove_filler,
            name=FILLER_REMOVAL_TASK,
        )

    async def remove_filler(self) -> None:
        try:
            queue = await self._queue_snapshot.get_queue()
            for item in queue:
                if item.uri == self._settings.filler_uri or item.title == self._settings.filler_title:
                    await self._queue_actuator.remove(item.slot_index)
                    logger.info(LogTemplates.FANFARE_REMOVED, item.slot_index)
                    return
            logger.info(LogTemplates.FANFARE_NOT_FOUND)
        except Exception as e:
            logger.warning(LogTemplates.FANFARE_REMOVE_FAILED, e)

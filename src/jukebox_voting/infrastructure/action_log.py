"""UserActionLog that writes to the standard logging system."""

from __future__ import annotations

import logging

from ..application.interfaces.messenger import UserActionLog
from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class LoggingUserActionLog(UserActionLog):
    async def record(self, user: str, action: str) -> None:
        logger.info(LogTemplates.USER_ACTION, user, action)

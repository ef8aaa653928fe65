"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the voting engine and
the systems around it. These are the "ports" in hexagonal architecture.
"""

from jukebox_voting.application.interfaces.config_provider import ConfigProvider
from jukebox_voting.application.interfaces.messenger import Messenger, UserActionLog
from jukebox_voting.application.interfaces.queue import QueueActuator, QueueSnapshot
from jukebox_voting.application.interfaces.scheduler import ScheduledHandle, Scheduler

__all__ = [
    "ConfigProvider",
    "Messenger",
    "UserActionLog",
    "QueueSnapshot",
    "QueueActuator",
    "Scheduler",
    "ScheduledHandle",
]

"""Port interfaces for chat output and user action bookkeeping."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Messenger(ABC):
    """Sends user-visible text to a chat channel."""

    @abstractmethod
    async def send(self, text: str, channel_id: str) -> None:
        ...


class UserActionLog(ABC):
    """Best-effort record of who did what."""

    @abstractmethod
    async def record(self, user: str, action: str) -> None:
        ...

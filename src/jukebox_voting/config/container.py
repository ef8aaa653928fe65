"""Dependency Injection Container

Manages the voting engine's dependency graph, providing lazy initialization
for the config provider, immunity registry, scheduler and engine. The
queue, messenger and action-log collaborators are supplied by the host
application; everything else is created on demand and cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.config_provider import ConfigProvider
    from ..application.interfaces.messenger import Messenger, UserActionLog
    from ..application.interfaces.queue import QueueActuator, QueueSnapshot
    from ..application.interfaces.scheduler import Scheduler
    from ..application.services.gong_fanfare import GongFanfare
    from ..application.services.voting_engine import VotingEngine
    from ..domain.voting.immunity import ImmunityRegistry
    from ..infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # External collaborators
    queue_snapshot: QueueSnapshot | None = None
    queue_actuator: QueueActuator | None = None
    messenger: Messenger | None = None
    user_action_log: UserActionLog | None = None
    scheduler: Scheduler | None = None

    # Random celebratory lines prefixed to ballot progress messages
    gong_messages: list[str] | None = None
    vote_messages: list[str] | None = None

    _owned_scheduler: AsyncioScheduler | None = None
    _config_provider: ConfigProvider | None = None
    _immunity_registry: ImmunityRegistry | None = None
    _gong_fanfare: GongFanfare | None = None
    _voting_engine: VotingEngine | None = None

    def _require(self, name: str) -> Any:
        value = getattr(self, name)
        if value is None:
            raise RuntimeError(ErrorMessages.COLLABORATOR_REQUIRED.format(name=name))
        return value

    # === Config ===

    @property
    def config_provider(self) -> ConfigProvider:
        """Get the runtime voting limits."""
        if self._config_provider is None:
            from .runtime import SettingsConfigProvider

            self._config_provider = SettingsConfigProvider(self.settings.voting)
        return self._config_provider

    # === Infrastructure ===

    @property
    def timer_scheduler(self) -> Scheduler:
        """Get the scheduler, defaulting to the asyncio event loop."""
        if self.scheduler is None:
            from ..infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler

            self._owned_scheduler = AsyncioScheduler()
            self.scheduler = self._owned_scheduler
        return self.scheduler

    @property
    def action_log(self) -> UserActionLog:
        if self.user_action_log is None:
            from ..infrastructure.action_log import LoggingUserActionLog

            self.user_action_log = LoggingUserActionLog()
        return self.user_action_log

    # === Domain ===

    @property
    def immunity_registry(self) -> ImmunityRegistry:
        if self._immunity_registry is None:
            from ..domain.voting.immunity import ImmunityRegistry

            self._immunity_registry = ImmunityRegistry()
        return self._immunity_registry

    # === Application services ===

    @property
    def gong_fanfare(self) -> GongFanfare:
        if self._gong_fanfare is None:
            from ..application.services.gong_fanfare import GongFanfare

            self._gong_fanfare = GongFanfare(
                queue_snapshot=self._require("queue_snapshot"),
                queue_actuator=self._require("queue_actuator"),
                scheduler=self.timer_scheduler,
                settings=self.settings.fanfare,
            )
        return self._gong_fanfare

    @property
    def voting_engine(self) -> VotingEngine:
        """Get the single voting engine instance."""
        if self._voting_engine is None:
            from ..application.services.voting_engine import VotingEngine
            from ..domain.voting.value_objects import VoteType

            voting = self.settings.voting
            self._voting_engine = VotingEngine(
                config=self.config_provider,
                queue_snapshot=self._require("queue_snapshot"),
                queue_actuator=self._require("queue_actuator"),
                messenger=self._require("messenger"),
                scheduler=self.timer_scheduler,
                fanfare=self.gong_fanfare,
                immunity=self.immunity_registry,
                user_action_log=self.action_log,
                cap_scopes={
                    VoteType.GONG: voting.gong_cap_scope,
                    VoteType.PROMOTE: voting.vote_cap_scope,
                    VoteType.IMMUNITY: voting.vote_immune_cap_scope,
                },
                gong_messages=self.gong_messages,
                vote_messages=self.vote_messages,
            )
        return self._voting_engine

    async def shutdown(self) -> None:
        """Close the engine and the scheduler this container created."""
        if self._voting_engine is not None:
            self._voting_engine.close()

        if self._owned_scheduler is not None:
            await self._owned_scheduler.close()
        logger.info("Container shutdown complete")


def create_container(settings: Settings | None = None, **collaborators: Any) -> Container:
    """Create a container, loading settings from the environment if none are given."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()
    return Container(settings=settings, **collaborators)

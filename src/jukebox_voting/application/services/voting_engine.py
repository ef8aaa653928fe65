"""The voting engine: the one object the command dispatcher talks to.

It owns every voting topic and the immunity registry, reads limits from the
ConfigProvider on each ballot, and drives the queue once a topic reaches
quorum. All topic state lives on a single engine instance built at startup.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping, Sequence
from functools import partial
from typing import TYPE_CHECKING, Any

from ...domain.shared.exceptions import ActuatorFailureError, NotFoundError, ValidationError, VotingError
from ...domain.shared.messages import LogTemplates, VoteMessages
from ...domain.tracks.value_objects import QueueItem, TrackRef
from ...domain.voting.entities import FlushVote, GongTopic, SlotVoteTable
from ...domain.voting.immunity import ImmunityRegistry
from ...domain.voting.services import VotingDomainService
from ...domain.voting.value_objects import (
    BallotReceipt,
    CapScope,
    ResetScope,
    VoteResult,
    VoteType,
)
from .voting_models import ConfigUpdateResult, GongStatus, VoteOutcome

if TYPE_CHECKING:
    from ..interfaces.config_provider import ConfigProvider
    from ..interfaces.messenger import Messenger, UserActionLog
    from ..interfaces.queue import QueueActuator, QueueSnapshot
    from ..interfaces.scheduler import Scheduler
    from .gong_fanfare import GongFanfare

logger = logging.getLogger(__name__)

FLUSH_WINDOW_TASK = "flush-vote-window"

# Used until the ConfigProvider has answered once for a key
DEFAULT_LIMITS: dict[str, int] = {
    "gong_limit": 3,
    "vote_limit": 3,
    "vote_immune_limit": 3,
    "flush_vote_limit": 6,
    "vote_time_limit_minutes": 5,
    "gong_limit_per_user": 1,
    "vote_limit_per_user": 4,
    "vote_immune_limit_per_user": 1,
    "flush_vote_limit_per_user": 1,
}


class VotingEngine:
    def __init__(
        self,
        *,
        config: ConfigProvider,
        queue_snapshot: QueueSnapshot,
        queue_actuator: QueueActuator,
        messenger: Messenger,
        scheduler: Scheduler,
        fanfare: GongFanfare,
        immunity: ImmunityRegistry | None = None,
        user_action_log: UserActionLog | None = None,
        cap_scopes: Mapping[VoteType, CapScope] | None = None,
        gong_messages: Sequence[str] | None = None,
        vote_messages: Sequence[str] | None = None,
    ) -> None:
        self._config = config
        self._queue_snapshot = queue_snapshot
        self._queue_actuator = queue_actuator
        self._messenger = messenger
        self._scheduler = scheduler
        self._fanfare = fanfare
        self._user_action_log = user_action_log
        self._gong_messages = list(gong_messages or [VoteMessages.DEFAULT_GONG_PREFIX])
        self._vote_messages = list(vote_messages or [VoteMessages.DEFAULT_VOTE_PREFIX])

        scopes = dict(cap_scopes or {})
        self.immunity = immunity if immunity is not None else ImmunityRegistry()
        self.gong = GongTopic(self.immunity, scopes.get(VoteType.GONG, CapScope.PER_TARGET))
        self.promotions = SlotVoteTable(
            VoteType.PROMOTE,
            reset_scope=ResetScope.SLOT,
            cap_scope=scopes.get(VoteType.PROMOTE, CapScope.GLOBAL),
        )
        self.immunity_votes = SlotVoteTable(
            VoteType.IMMUNITY,
            reset_scope=ResetScope.TABLE,
            cap_scope=scopes.get(VoteType.IMMUNITY, CapScope.GLOBAL),
        )
        self.flush = FlushVote()

        self._last_known: dict[str, int] = dict(DEFAULT_LIMITS)
        logger.info(
            LogTemplates.ENGINE_INITIALIZED,
            self._limit("gong_limit"),
            self._limit("vote_limit"),
            self._limit("vote_immune_limit"),
            self._limit("flush_vote_limit"),
        )

    # === Gong ===

    async def cast_gong(self, user: str, channel_id: str) -> VoteOutcome:
        """Vote to skip whatever is playing right now."""
        vote_type = VoteType.GONG
        await self._record_action(user, vote_type)

        try:
            current = await self._queue_snapshot.get_current_track()
        except Exception:
            return await self._snapshot_failed(vote_type, channel_id)

        track = current.ref if current is not None else TrackRef()
        regretful = self.immunity_votes.has_ballots(user)
        try:
            receipt = self.gong.cast(
                user,
                track,
                cap=self._limit(vote_type.cap_key),
                limit=self._limit(vote_type.limit_key),
            )
        except VotingError as exc:
            return await self._reject(vote_type, exc, user, channel_id, track.title)

        self._log_ballot(vote_type, user, track.title, receipt)
        if regretful:
            await self._send(VoteMessages.GONG_REGRETS.format(user=user), channel_id)
        progress = VoteMessages.GONG_RECORDED.format(
            prefix=random.choice(self._gong_messages),
            votes=receipt.votes,
            needed=receipt.needed,
            title=track.title,
        )
        await self._send(progress, channel_id)
        if not receipt.quorum_reached:
            return VoteOutcome.from_receipt(vote_type, VoteResult.VOTE_RECORDED, receipt, progress)

        await self._send(VoteMessages.GONG_TRIGGERED, channel_id)
        try:
            await self._fanfare.skip_with_fanfare()
        except ActuatorFailureError:
            await self._send(VoteMessages.GONG_SKIP_FAILED, channel_id)
            return VoteOutcome.from_receipt(
                vote_type, VoteResult.ACTUATOR_FAILED, receipt, VoteMessages.GONG_SKIP_FAILED
            )
        return VoteOutcome.from_receipt(
            vote_type, VoteResult.THRESHOLD_MET, receipt, VoteMessages.GONG_TRIGGERED
        )

    async def check_gong(self, channel_id: str) -> GongStatus | None:
        """Report how many more gongs the current track needs, or that it is immune."""
        try:
            current = await self._queue_snapshot.get_current_track()
        except Exception:
            logger.exception(LogTemplates.SNAPSHOT_FAILED, "gongcheck")
            await self._send(VoteMessages.UNEXPECTED_ERROR, channel_id)
            return None

        if current is None or current.ref.is_empty:
            await self._send(VoteMessages.NOTHING_PLAYING, channel_id)
            return None

        track = current.ref
        status = GongStatus(
            track_title=track.title,
            votes=self.gong.tally_for(track),
            needed=self._limit(VoteType.GONG.limit_key),
            immune=self.immunity.contains(track),
        )
        if status.immune:
            message = VoteMessages.GONG_STATUS_IMMUNE
        else:
            message = VoteMessages.GONG_STATUS.format(left=status.votes_remaining, title=track.title)
        await self._send(message, channel_id)
        return status

    def reset_gong_state(self) -> None:
        self.gong.reset()
        logger.info(LogTemplates.GONG_STATE_RESET)

    # === Promote ===

    async def cast_promotion_vote(self, user: str, slot: int, channel_id: str) -> VoteOutcome:
        """Vote to move the track at ``slot`` so it plays next."""
        vote_type = VoteType.PROMOTE
        await self._record_action(user, vote_type)

        try:
            queue = await self._queue_snapshot.get_queue()
            current = await self._queue_snapshot.get_current_track()
        except Exception:
            return await self._snapshot_failed(vote_type, channel_id)

        item = VotingDomainService.find_slot(queue, slot)
        try:
            receipt = self._cast_slot_vote(self.promotions, user, item, slot)
        except VotingError as exc:
            return await self._reject(vote_type, exc, user, channel_id)

        self._log_ballot(vote_type, user, receipt.track_title, receipt)
        progress = VoteMessages.VOTE_RECORDED.format(
            votes=receipt.votes, needed=receipt.needed, title=receipt.track_title
        )
        await self._send(progress, channel_id)
        if not receipt.quorum_reached:
            return VoteOutcome.from_receipt(vote_type, VoteResult.VOTE_RECORDED, receipt, progress)

        await self._send(random.choice(self._vote_messages), channel_id)
        destination = VotingDomainService.promotion_destination(current)
        try:
            await self._queue_actuator.reorder(slot, destination)
        except Exception:
            logger.exception(LogTemplates.ACTUATOR_FAILED, "reorder")
            await self._send(VoteMessages.VOTE_MOVE_FAILED, channel_id)
            return VoteOutcome.from_receipt(
                vote_type, VoteResult.ACTUATOR_FAILED, receipt, VoteMessages.VOTE_MOVE_FAILED
            )

        logger.info(LogTemplates.TRACK_PROMOTED, receipt.track_title, slot, destination)
        message = VoteMessages.VOTE_TRIGGERED.format(title=receipt.track_title)
        await self._send(message, channel_id)
        return VoteOutcome.from_receipt(vote_type, VoteResult.THRESHOLD_MET, receipt, message)

    async def check_promotion_votes(self, channel_id: str) -> dict[int, int]:
        """Post the tally of every slot with promotion votes."""
        active = self.promotions.active_slots()
        if not active:
            await self._send(VoteMessages.VOTE_STATUS_EMPTY, channel_id)
            return {}

        try:
            queue = await self._queue_snapshot.get_queue()
        except Exception:
            logger.exception(LogTemplates.SNAPSHOT_FAILED, "votecheck")
            await self._send(VoteMessages.VOTE_STATUS_ERROR, channel_id)
            return {index: slot.tally for index, slot in active.items()}

        lines = VotingDomainService.status_lines(
            active, queue, self._limit(VoteType.PROMOTE.limit_key)
        )
        await self._send("\n".join([VoteMessages.VOTE_STATUS_HEADER, *lines]), channel_id)
        return {index: slot.tally for index, slot in active.items()}

    def has_active_votes(self, slot: int) -> bool:
        return self.promotions.has_active_votes(slot)

    def invalidate_slot(self, slot: int) -> None:
        """Forget every slot vote on ``slot``, e.g. when its contents changed."""
        for table in (self.promotions, self.immunity_votes):
            if table.invalidate_slot(slot):
                logger.info(LogTemplates.SLOT_INVALIDATED, table.vote_type.value, slot)

    # === Immunity ===

    async def cast_immunity_vote(self, user: str, slot: int, channel_id: str) -> VoteOutcome:
        """Vote to protect the track at ``slot`` from the gong."""
        vote_type = VoteType.IMMUNITY
        await self._record_action(user, vote_type)

        try:
            queue = await self._queue_snapshot.get_queue()
        except Exception:
            return await self._snapshot_failed(vote_type, channel_id)

        item = VotingDomainService.find_slot(queue, slot)
        try:
            receipt = self._cast_slot_vote(self.immunity_votes, user, item, slot)
        except VotingError as exc:
            return await self._reject(vote_type, exc, user, channel_id)

        if receipt.quorum_reached and item is not None:
            self.immunity.ban(item.ref)

        self._log_ballot(vote_type, user, receipt.track_title, receipt)
        progress = VoteMessages.IMMUNE_RECORDED.format(
            votes=receipt.votes, needed=receipt.needed, title=receipt.track_title
        )
        await self._send(progress, channel_id)
        if not receipt.quorum_reached:
            return VoteOutcome.from_receipt(vote_type, VoteResult.VOTE_RECORDED, receipt, progress)

        message = VoteMessages.IMMUNE_TRIGGERED.format(title=receipt.track_title)
        await self._send(message, channel_id)
        return VoteOutcome.from_receipt(vote_type, VoteResult.THRESHOLD_MET, receipt, message)

    async def check_immunity_votes(self, channel_id: str) -> dict[int, int]:
        """Post immunity vote tallies followed by the list of immune tracks."""
        needed = self._limit(VoteType.IMMUNITY.limit_key)
        active = self.immunity_votes.active_slots()
        if not active:
            await self._send(VoteMessages.IMMUNE_STATUS.format(votes=0, needed=needed), channel_id)
        else:
            try:
                queue = await self._queue_snapshot.get_queue()
            except Exception:
                logger.exception(LogTemplates.SNAPSHOT_FAILED, "voteimmunecheck")
                queue = []
            lines = VotingDomainService.status_lines(active, queue, needed)
            await self._send("\n".join([VoteMessages.VOTE_STATUS_HEADER, *lines]), channel_id)

        await self.list_immune_tracks(channel_id)
        return {index: slot.tally for index, slot in active.items()}

    async def list_immune_tracks(self, channel_id: str) -> list[TrackRef]:
        tracks = self.immunity.tracks()
        await self._send(VotingDomainService.immune_listing(tracks), channel_id)
        return tracks

    def is_track_immune(self, ref: object, artist: str | None = None) -> bool:
        return self.immunity.contains(ref, artist)

    def ban_track(self, ref: object, artist: str | None = None) -> bool:
        return self.immunity.ban(ref, artist)

    # === Flush ===

    async def cast_flush_vote(self, user: str, channel_id: str) -> VoteOutcome:
        """Vote to clear the whole queue within the current voting window."""
        vote_type = VoteType.FLUSH
        await self._record_action(user, vote_type)

        try:
            receipt = self.flush.cast(
                user,
                cap=self._limit(vote_type.cap_key),
                limit=self._limit(vote_type.limit_key),
                channel_id=channel_id,
            )
        except VotingError as exc:
            return await self._reject(vote_type, exc, user, channel_id)

        minutes = self._limit("vote_time_limit_minutes")
        if receipt.window_opened and not receipt.quorum_reached:
            handle = self._scheduler.call_later(
                minutes * 60,
                partial(self._expire_flush_window, self.flush.generation, channel_id),
                name=FLUSH_WINDOW_TASK,
            )
            self.flush.attach_timer(handle)
            logger.info(LogTemplates.FLUSH_WINDOW_OPENED, minutes)

        self._log_ballot(vote_type, user, "queue", receipt)
        if receipt.window_opened:
            await self._send(
                VoteMessages.FLUSH_WINDOW_OPENED.format(minutes=minutes, needed=receipt.needed),
                channel_id,
            )
        progress = VoteMessages.FLUSH_RECORDED.format(votes=receipt.votes, needed=receipt.needed)
        await self._send(progress, channel_id)
        if not receipt.quorum_reached:
            return VoteOutcome.from_receipt(vote_type, VoteResult.VOTE_RECORDED, receipt, progress)

        await self._send(VoteMessages.FLUSH_TRIGGERED, channel_id)
        try:
            await self._queue_actuator.flush()
        except Exception:
            logger.exception(LogTemplates.ACTUATOR_FAILED, "flush")
            await self._send(VoteMessages.FLUSH_FAILED, channel_id)
            return VoteOutcome.from_receipt(
                vote_type, VoteResult.ACTUATOR_FAILED, receipt, VoteMessages.FLUSH_FAILED
            )
        return VoteOutcome.from_receipt(
            vote_type, VoteResult.THRESHOLD_MET, receipt, VoteMessages.FLUSH_TRIGGERED
        )

    async def _expire_flush_window(self, generation: int, channel_id: str) -> None:
        if not self.flush.expire(generation):
            logger.debug(LogTemplates.FLUSH_WINDOW_STALE, generation)
            return
        logger.info(LogTemplates.FLUSH_WINDOW_EXPIRED)
        await self._send(VoteMessages.FLUSH_EXPIRED, channel_id)

    # === Config ===

    def set_config(self, values: Mapping[str, Any]) -> ConfigUpdateResult:
        """Apply a partial limit update; never raises."""
        if not values:
            return ConfigUpdateResult(success=True, message=VoteMessages.CONFIG_UNCHANGED)
        try:
            changed = self._config.update(values)
        except ValidationError as exc:
            return ConfigUpdateResult(
                success=False, message=VoteMessages.CONFIG_INVALID.format(reason=exc.message)
            )

        for key, (_, new) in changed.items():
            self._last_known[key] = new
        if not changed:
            return ConfigUpdateResult(success=True, message=VoteMessages.CONFIG_UNCHANGED)
        changes = ", ".join(f"`{key}` {old} → {new}" for key, (old, new) in changed.items())
        return ConfigUpdateResult(
            success=True, message=VoteMessages.CONFIG_UPDATED.format(changes=changes), changed=changed
        )

    def get_config(self) -> dict[str, int]:
        return {key: self._limit(key) for key in DEFAULT_LIMITS}

    def close(self) -> None:
        """Cancel the open flush window, if any."""
        self.flush.close()
        logger.info(LogTemplates.ENGINE_CLOSED)

    # === Helpers ===

    def _limit(self, key: str) -> int:
        """Read a limit live, falling back to the last value read successfully."""
        try:
            value = self._config.get(key)
        except Exception:
            value = None
        if value is None:
            fallback = self._last_known[key]
            logger.warning(LogTemplates.CONFIG_READ_FAILED, key, fallback)
            return fallback
        value = int(value)
        self._last_known[key] = value
        return value

    def _cast_slot_vote(
        self, table: SlotVoteTable, user: str, item: QueueItem | None, slot: int
    ) -> BallotReceipt:
        if item is None:
            raise NotFoundError(slot)
        return table.cast(
            user,
            item,
            cap=self._limit(table.vote_type.cap_key),
            limit=self._limit(table.vote_type.limit_key),
        )

    def _log_ballot(
        self, vote_type: VoteType, user: str, target: str, receipt: BallotReceipt
    ) -> None:
        logger.info(
            LogTemplates.BALLOT_RECORDED, vote_type.value, user, target, receipt.votes, receipt.needed
        )
        if receipt.quorum_reached:
            logger.info(LogTemplates.QUORUM_REACHED, vote_type.value, target)

    async def _reject(
        self,
        vote_type: VoteType,
        error: VotingError,
        user: str,
        channel_id: str,
        track_title: str = "",
    ) -> VoteOutcome:
        logger.info(LogTemplates.BALLOT_REJECTED, vote_type.value, user, error.message)
        message = VotingDomainService.rejection_message(vote_type, error, user)
        await self._send(message, channel_id)
        return VoteOutcome(
            vote_type=vote_type,
            result=VotingDomainService.result_for(error),
            message=message,
            track_title=track_title,
        )

    async def _snapshot_failed(self, vote_type: VoteType, channel_id: str) -> VoteOutcome:
        logger.exception(LogTemplates.SNAPSHOT_FAILED, vote_type.value)
        await self._send(VoteMessages.UNEXPECTED_ERROR, channel_id)
        return VoteOutcome(
            vote_type=vote_type, result=VoteResult.ERROR, message=VoteMessages.UNEXPECTED_ERROR
        )

    async def _send(self, text: str, channel_id: str) -> None:
        try:
            await self._messenger.send(text, channel_id)
        except Exception as e:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, channel_id, e)

    async def _record_action(self, user: str, vote_type: VoteType) -> None:
        if self._user_action_log is None:
            return
        try:
            await self._user_action_log.record(user, vote_type.action_name)
        except Exception as e:
            logger.warning(LogTemplates.ACTION_LOG_FAILED, vote_type.action_name, user, e)

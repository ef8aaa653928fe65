"""Core domain entities for the voting bounded context.

Every mutating method here is synchronous. Callers await queue reads before
calling in and perform side effects after the call returns, so a ballot is
recorded, counted and (on quorum) reset in one uninterrupted step.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel, Field

from jukebox_voting.domain.shared.exceptions import (
    AlreadyVotedError,
    CapReachedError,
    ImmuneError,
    NothingPlayingError,
)
from jukebox_voting.domain.shared.messages import LogTemplates
from jukebox_voting.domain.shared.types import NonNegativeInt, SlotIndex
from jukebox_voting.domain.tracks.value_objects import QueueItem, TrackRef
from jukebox_voting.domain.voting.immunity import ImmunityRegistry
from jukebox_voting.domain.voting.value_objects import (
    BallotReceipt,
    CapScope,
    ResetScope,
    TopicState,
    VoteType,
)

logger = logging.getLogger(__name__)

_ANY_TARGET = ""


class BallotLedger:
    """Per-user ballot counters for one topic.

    With ``CapScope.GLOBAL`` every ballot a user casts counts against a single
    counter no matter which track or slot it targeted; with
    ``CapScope.PER_TARGET`` each target has its own counter.
    """

    def __init__(self, scope: CapScope = CapScope.GLOBAL) -> None:
        self.scope = scope
        self._counts: dict[tuple[str, str], int] = {}

    def _key(self, user: str, target: str) -> tuple[str, str]:
        if self.scope is CapScope.PER_TARGET:
            return (user, target)
        return (user, _ANY_TARGET)

    def count(self, user: str, target: str = _ANY_TARGET) -> int:
        return self._counts.get(self._key(user, target), 0)

    def is_capped(self, user: str, cap: int, target: str = _ANY_TARGET) -> bool:
        return self.count(user, target) >= cap

    def record(self, user: str, target: str = _ANY_TARGET) -> int:
        key = self._key(user, target)
        self._counts[key] = self._counts.get(key, 0) + 1
        return self._counts[key]

    def has_ballots(self, user: str) -> bool:
        return any(count > 0 for (owner, _), count in self._counts.items() if owner == user)

    def clear(self) -> None:
        self._counts.clear()

    def __len__(self) -> int:
        return len(self._counts)


class GongTopic:
    """The single skip-vote, bound to whatever track is currently playing.

    The bound track is detected lazily: each ballot compares the observed
    track with the one the tally belongs to and starts over when they differ.

    With ``CapScope.PER_TARGET`` the per-user counters start over along with
    the tally, so the cap applies per track. With ``CapScope.GLOBAL`` they
    survive track changes and quorum and only ``reset`` clears them.
    """

    def __init__(
        self,
        immunity: ImmunityRegistry,
        cap_scope: CapScope = CapScope.PER_TARGET,
    ) -> None:
        self._immunity = immunity
        self._ledger = BallotLedger(cap_scope)
        self._ballots: dict[str, int] = {}
        self.bound_track: TrackRef | None = None
        self.tally = 0

    @property
    def bound_key(self) -> str:
        return self.bound_track.key if self.bound_track is not None else ""

    @property
    def state(self) -> TopicState:
        return TopicState.ACCUMULATING if self.tally else TopicState.IDLE

    @property
    def ballots(self) -> dict[str, int]:
        return dict(self._ballots)

    def user_count(self, user: str) -> int:
        return self._ledger.count(user, self.bound_key)

    def tally_for(self, track: TrackRef) -> int:
        """Current tally if ``track`` is the bound track, else zero."""
        return self.tally if track.key == self.bound_key else 0

    def cast(self, user: str, track: TrackRef, *, cap: int, limit: int) -> BallotReceipt:
        """Record a gong ballot against ``track``.

        On quorum the track is made immune and the topic is emptied before
        this returns; the caller performs the skip.
        """
        if track.is_empty:
            raise NothingPlayingError()
        if self._immunity.contains(track):
            raise ImmuneError(track.title)

        if track.key != self.bound_key:
            self._rebind(track)

        if self._ledger.is_capped(user, cap, track.key):
            raise CapReachedError(user, cap)

        self._ballots[user] = self._ballots.get(user, 0) + 1
        self._ledger.record(user, track.key)
        self.tally += 1
        votes = self.tally

        if votes < limit:
            return BallotReceipt(votes=votes, needed=limit, track_title=track.title)

        self._immunity.ban(track)
        self._clear()
        return BallotReceipt(
            votes=votes, needed=limit, quorum_reached=True, track_title=track.title
        )

    def reset(self) -> None:
        """Forget the bound track along with every ballot and user counter."""
        self._clear()
        self._ledger.clear()
        self.bound_track = None

    def _rebind(self, track: TrackRef) -> None:
        if self.bound_track is not None:
            logger.info(LogTemplates.GONG_TRACK_CHANGED, self.bound_key, track.key)
        self._clear()
        self.bound_track = track

    def _clear(self) -> None:
        self.tally = 0
        self._ballots.clear()
        if self._ledger.scope is CapScope.PER_TARGET:
            self._ledger.clear()


class SlotTally(BaseModel):
    """Ballots collected for one queue slot."""

    slot_index: SlotIndex
    track: TrackRef = Field(default_factory=TrackRef)
    ballots: set[str] = Field(default_factory=set)
    tally: NonNegativeInt = 0


class SlotVoteTable:
    """Independent quorum votes, one per queue slot.

    Promotion and immunity votes share this type and differ only in their
    ``ResetScope``: a promotion quorum forgets the decided slot, an immunity
    quorum also forgets every user's table-wide counter.
    """

    def __init__(
        self,
        vote_type: VoteType,
        *,
        reset_scope: ResetScope = ResetScope.SLOT,
        cap_scope: CapScope = CapScope.GLOBAL,
    ) -> None:
        self.vote_type = vote_type
        self.reset_scope = reset_scope
        self._ledger = BallotLedger(cap_scope)
        self._slots: dict[int, SlotTally] = {}

    def cast(self, user: str, item: QueueItem, *, cap: int, limit: int) -> BallotReceipt:
        slot_index = item.slot_index
        target = str(slot_index)

        if self._ledger.is_capped(user, cap, target):
            raise CapReachedError(user, cap)

        slot = self._slots.get(slot_index)
        if slot is not None and user in slot.ballots:
            raise AlreadyVotedError(user, f"{self.vote_type.value} slot {slot_index}")

        if slot is None:
            slot = self._slots[slot_index] = SlotTally(slot_index=slot_index)
        slot.track = item.ref
        slot.ballots.add(user)
        slot.tally += 1
        self._ledger.record(user, target)
        votes = slot.tally

        if votes < limit:
            return BallotReceipt(votes=votes, needed=limit, track_title=item.title)

        self._reset_after_quorum(slot_index)
        return BallotReceipt(
            votes=votes, needed=limit, quorum_reached=True, track_title=item.title
        )

    def _reset_after_quorum(self, slot_index: int) -> None:
        self._slots.pop(slot_index, None)
        if self.reset_scope is ResetScope.TABLE:
            self._ledger.clear()

    def invalidate_slot(self, slot_index: int) -> bool:
        """Drop a slot's tally and ballots. Users' table-wide counters are kept."""
        return self._slots.pop(slot_index, None) is not None

    def tally_for(self, slot_index: int) -> int:
        slot = self._slots.get(slot_index)
        return slot.tally if slot is not None else 0

    def voters_for(self, slot_index: int) -> frozenset[str]:
        slot = self._slots.get(slot_index)
        return frozenset(slot.ballots) if slot is not None else frozenset()

    def has_active_votes(self, slot_index: int) -> bool:
        return self.tally_for(slot_index) > 0

    def active_slots(self) -> dict[int, SlotTally]:
        """Slots with a non-zero tally, ordered by slot index."""
        return {
            index: slot.model_copy(deep=True)
            for index, slot in sorted(self._slots.items())
            if slot.tally > 0
        }

    def user_count(self, user: str, slot_index: int | None = None) -> int:
        target = str(slot_index) if slot_index is not None else _ANY_TARGET
        return self._ledger.count(user, target)

    def has_ballots(self, user: str) -> bool:
        return self._ledger.has_ballots(user)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class FlushVote:
    """The timed group vote to clear the queue.

    A window opens with its first ballot and closes on quorum or timeout,
    whichever happens first. Each window gets a new ``generation`` so a
    timeout scheduled for an earlier window can never close a later one.
    """

    def __init__(self) -> None:
        self._ballots: dict[str, int] = {}
        self._timer: TimerHandle | None = None
        self.generation = 0
        self.is_open = False
        self.channel_id: str | None = None

    @property
    def state(self) -> TopicState:
        return TopicState.OPEN if self.is_open else TopicState.IDLE

    @property
    def tally(self) -> int:
        return sum(self._ballots.values())

    @property
    def voters(self) -> frozenset[str]:
        return frozenset(self._ballots)

    @property
    def has_timer(self) -> bool:
        return self._timer is not None

    def cast(
        self, user: str, *, cap: int, limit: int, channel_id: str | None = None
    ) -> BallotReceipt:
        if self._ballots.get(user, 0) >= cap:
            raise AlreadyVotedError(user, VoteType.FLUSH.value)

        opened = not self.is_open
        if opened:
            self.generation += 1
            self.is_open = True
            self.channel_id = channel_id

        self._ballots[user] = self._ballots.get(user, 0) + 1
        votes = self.tally

        if votes < limit:
            return BallotReceipt(votes=votes, needed=limit, window_opened=opened)

        self.close()
        return BallotReceipt(votes=votes, needed=limit, quorum_reached=True, window_opened=opened)

    def attach_timer(self, handle: TimerHandle) -> None:
        self._timer = handle

    def expire(self, generation: int) -> bool:
        """Close the window on timeout. Returns False if that window is already gone."""
        if not self.is_open or generation != self.generation:
            return False
        self._timer = None
        self.close()
        return True

    def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._ballots.clear()
        self.is_open = False
        self.channel_id = None

"""
Voting Domain Value Objects

Immutable value objects for the voting bounded context.
"""

from __future__ import annotations

from enum import Enum, StrEnum

from pydantic import BaseModel, ConfigDict

from jukebox_voting.domain.shared.types import NonNegativeInt


class VoteType(Enum):
    """Topics a ballot can be cast on."""

    GONG = "gong"  # Skip whatever is currently playing
    PROMOTE = "promote"  # Move a queued track to play next
    IMMUNITY = "immunity"  # Protect a queued track from the gong
    FLUSH = "flush"  # Clear the whole queue

    @property
    def action_name(self) -> str:
        """Name recorded in the user action log."""
        return {
            VoteType.GONG: "gong",
            VoteType.PROMOTE: "vote",
            VoteType.IMMUNITY: "voteimmune",
            VoteType.FLUSH: "flushvote",
        }[self]

    @property
    def limit_key(self) -> str:
        """Config key holding the quorum for this topic."""
        return {
            VoteType.GONG: "gong_limit",
            VoteType.PROMOTE: "vote_limit",
            VoteType.IMMUNITY: "vote_immune_limit",
            VoteType.FLUSH: "flush_vote_limit",
        }[self]

    @property
    def cap_key(self) -> str:
        """Config key holding the per-user ballot cap for this topic."""
        return f"{self.limit_key}_per_user"


class VoteResult(Enum):
    """Results of attempting to cast a ballot."""

    # Successful outcomes
    VOTE_RECORDED = "vote_recorded"  # Ballot counted, quorum not yet reached
    THRESHOLD_MET = "threshold_met"  # Ballot reached quorum, action executed

    # Ballot not counted outcomes
    ALREADY_VOTED = "already_voted"
    CAP_REACHED = "cap_reached"
    IMMUNE = "immune"
    NOT_FOUND = "not_found"
    NO_PLAYING = "no_playing"

    # Error outcomes
    ACTUATOR_FAILED = "actuator_failed"  # Quorum reached, queue rejected the action
    ERROR = "error"  # Could not read the queue

    @property
    def is_success(self) -> bool:
        """Check if the ballot was counted."""
        return self in {
            VoteResult.VOTE_RECORDED,
            VoteResult.THRESHOLD_MET,
            VoteResult.ACTUATOR_FAILED,
        }

    @property
    def quorum_reached(self) -> bool:
        """Check if the ballot decided the topic, whether or not the action succeeded."""
        return self in {VoteResult.THRESHOLD_MET, VoteResult.ACTUATOR_FAILED}

    @property
    def action_executed(self) -> bool:
        """Check if the voted action was carried out."""
        return self is VoteResult.THRESHOLD_MET


class CapScope(StrEnum):
    """How a table counts a user's ballots against their cap."""

    GLOBAL = "global"  # One counter per user across every track or slot
    PER_TARGET = "per_target"  # One counter per user and track or slot


class ResetScope(StrEnum):
    """What a slot table forgets once a slot reaches quorum."""

    SLOT = "slot"  # Only the decided slot's ballots
    TABLE = "table"  # The decided slot's ballots and every user's table-wide counter


class TopicState(StrEnum):
    """Lifecycle of a single voting topic."""

    IDLE = "idle"
    ACCUMULATING = "accumulating"
    OPEN = "open"


class BallotReceipt(BaseModel):
    """What an accepted ballot did to its topic."""

    model_config = ConfigDict(frozen=True)

    votes: NonNegativeInt
    needed: NonNegativeInt
    quorum_reached: bool = False
    window_opened: bool = False
    track_title: str = ""

    @property
    def votes_remaining(self) -> int:
        return max(0, self.needed - self.votes)

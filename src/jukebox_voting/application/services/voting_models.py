"""DTOs returned by the voting engine."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...domain.shared.types import NonNegativeInt
from ...domain.voting.value_objects import BallotReceipt, VoteResult, VoteType


class VoteOutcome(BaseModel):
    """What happened to one ballot, as reported back to the dispatcher."""

    model_config = ConfigDict(frozen=True)

    vote_type: VoteType
    result: VoteResult
    message: str = ""
    votes: NonNegativeInt = 0
    needed: NonNegativeInt = 0
    track_title: str = ""

    @property
    def is_success(self) -> bool:
        return self.result.is_success

    @property
    def quorum_reached(self) -> bool:
        return self.result.quorum_reached

    @property
    def action_executed(self) -> bool:
        return self.result.action_executed

    @classmethod
    def from_receipt(
        cls, vote_type: VoteType, result: VoteResult, receipt: BallotReceipt, message: str
    ) -> VoteOutcome:
        return cls(
            vote_type=vote_type,
            result=result,
            message=message,
            votes=receipt.votes,
            needed=receipt.needed,
            track_title=receipt.track_title,
        )


class GongStatus(BaseModel):
    """Read-only view of the skip-vote for the current track."""

    model_config = ConfigDict(frozen=True)

    track_title: str
    votes: NonNegativeInt = 0
    needed: NonNegativeInt = 0
    immune: bool = False

    @property
    def votes_remaining(self) -> int:
        return max(0, self.needed - self.votes)


class ConfigUpdateResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str = ""
    changed: dict[str, tuple[Any, Any]] = Field(default_factory=dict)

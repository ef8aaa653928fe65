"""
Voting Bounded Context

Domain logic for the skip-vote (gong), promote and immunity slot votes, the
timed flush vote, and the registry of immune tracks.
"""

from jukebox_voting.domain.voting.entities import (
    BallotLedger,
    FlushVote,
    GongTopic,
    SlotTally,
    SlotVoteTable,
)
from jukebox_voting.domain.voting.immunity import ImmunityRegistry
from jukebox_voting.domain.voting.services import VotingDomainService
from jukebox_voting.domain.voting.value_objects import (
    BallotReceipt,
    CapScope,
    ResetScope,
    TopicState,
    VoteResult,
    VoteType,
)

__all__ = [
    # Entities
    "BallotLedger",
    "GongTopic",
    "SlotTally",
    "SlotVoteTable",
    "FlushVote",
    "ImmunityRegistry",
    # Value Objects
    "VoteType",
    "VoteResult",
    "CapScope",
    "ResetScope",
    "TopicState",
    "BallotReceipt",
    # Services
    "VotingDomainService",
]

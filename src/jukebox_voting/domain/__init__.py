# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, messages and annotated types
- tracks/: Track identity and queue snapshot rows
- voting/: Ballot bookkeeping, immunity and quorum rules
"""

from jukebox_voting.domain.shared.exceptions import DomainError, VotingError
from jukebox_voting.domain.tracks.value_objects import QueueItem, TrackRef

__all__ = [
    "TrackRef",
    "QueueItem",
    "DomainError",
    "VotingError",
]

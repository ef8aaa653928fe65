"""
Shared Domain Kernel

Contains exceptions, message catalogues and annotated types shared across the
voting engine.
"""

from jukebox_voting.domain.shared.exceptions import (
    ActuatorFailureError,
    AlreadyVotedError,
    BusinessRuleViolationError,
    CapReachedError,
    DomainError,
    ImmuneError,
    NotFoundError,
    NothingPlayingError,
    ValidationError,
    VotingError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "BusinessRuleViolationError",
    "VotingError",
    "NotFoundError",
    "NothingPlayingError",
    "AlreadyVotedError",
    "CapReachedError",
    "ImmuneError",
    "ActuatorFailureError",
]

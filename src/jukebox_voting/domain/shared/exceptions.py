"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class BusinessRuleViolationError(DomainError):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str | None = None) -> None:
        msg = message or f"Business rule violated: {rule}"
        super().__init__(msg, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


# === Voting taxonomy ===


class VotingError(BusinessRuleViolationError):
    """Base class for ballots that were rejected or could not be applied."""

    rule_name = "voting"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.rule_name, message)
        self.code = self.__class__.__name__


class NotFoundError(VotingError):
    """The addressed slot or track is absent from the current queue snapshot."""

    rule_name = "target_exists"

    def __init__(self, slot: int | None = None, message: str | None = None) -> None:
        super().__init__(message or f"Nothing found at queue slot {slot}")
        self.slot = slot


class NothingPlayingError(VotingError):
    """No track is playing, so there is nothing to vote on."""

    rule_name = "track_playing"

    def __init__(self) -> None:
        super().__init__("Nothing is currently playing")


class AlreadyVotedError(VotingError):
    """The user already has a ballot on this topic or slot."""

    rule_name = "one_ballot_per_topic"

    def __init__(self, user: str, topic: str) -> None:
        super().__init__(f"{user} already voted on {topic}")
        self.user = user
        self.topic = topic


class CapReachedError(VotingError):
    """The user has used up their ballots for this topic."""

    rule_name = "per_user_cap"

    def __init__(self, user: str, cap: int) -> None:
        super().__init__(f"{user} reached the ballot cap of {cap}")
        self.user = user
        self.cap = cap


class ImmuneError(VotingError):
    """The track is protected from the skip-vote."""

    rule_name = "track_not_immune"

    def __init__(self, track_title: str) -> None:
        super().__init__(f"'{track_title}' is immune")
        self.track_title = track_title


class ActuatorFailureError(VotingError):
    """The queue rejected the side effect of a decided vote."""

    rule_name = "actuator_succeeds"

    def __init__(self, action: str, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Queue action '{action}' failed{detail}")
        self.action = action
        self.cause = cause

"""
Voting Domain Services

Domain services containing voting business rules that do not belong to a
single topic.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from jukebox_voting.domain.shared.exceptions import (
    ActuatorFailureError,
    AlreadyVotedError,
    CapReachedError,
    ImmuneError,
    NotFoundError,
    NothingPlayingError,
    VotingError,
)
from jukebox_voting.domain.shared.messages import VoteMessages
from jukebox_voting.domain.tracks.value_objects import QueueItem, TrackRef
from jukebox_voting.domain.voting.entities import SlotTally
from jukebox_voting.domain.voting.value_objects import VoteResult, VoteType


class VotingDomainService:
    """Domain service for voting-related business rules.

    Maps rejected ballots onto results and chat text, and computes where a
    promoted track should land.
    """

    _RESULTS: dict[type[VotingError], VoteResult] = {
        NotFoundError: VoteResult.NOT_FOUND,
        NothingPlayingError: VoteResult.NO_PLAYING,
        AlreadyVotedError: VoteResult.ALREADY_VOTED,
        CapReachedError: VoteResult.CAP_REACHED,
        ImmuneError: VoteResult.IMMUNE,
        ActuatorFailureError: VoteResult.ACTUATOR_FAILED,
    }

    _REJECTIONS: dict[tuple[VoteType, VoteResult], str] = {
        (VoteType.GONG, VoteResult.NO_PLAYING): VoteMessages.NOTHING_TO_GONG,
        (VoteType.GONG, VoteResult.IMMUNE): VoteMessages.GONG_IMMUNE,
        (VoteType.GONG, VoteResult.CAP_REACHED): VoteMessages.GONG_CAP_REACHED,
        (VoteType.GONG, VoteResult.ACTUATOR_FAILED): VoteMessages.GONG_SKIP_FAILED,
        (VoteType.PROMOTE, VoteResult.NOT_FOUND): VoteMessages.SLOT_NOT_FOUND,
        (VoteType.PROMOTE, VoteResult.ALREADY_VOTED): VoteMessages.VOTE_ALREADY_VOTED,
        (VoteType.PROMOTE, VoteResult.CAP_REACHED): VoteMessages.VOTE_CAP_REACHED,
        (VoteType.PROMOTE, VoteResult.ACTUATOR_FAILED): VoteMessages.VOTE_MOVE_FAILED,
        (VoteType.IMMUNITY, VoteResult.NOT_FOUND): VoteMessages.IMMUNE_SLOT_NOT_FOUND,
        (VoteType.IMMUNITY, VoteResult.ALREADY_VOTED): VoteMessages.IMMUNE_ALREADY_VOTED,
        (VoteType.IMMUNITY, VoteResult.CAP_REACHED): VoteMessages.IMMUNE_CAP_REACHED,
        (VoteType.FLUSH, VoteResult.ALREADY_VOTED): VoteMessages.FLUSH_ALREADY_VOTED,
        (VoteType.FLUSH, VoteResult.CAP_REACHED): VoteMessages.FLUSH_ALREADY_VOTED,
        (VoteType.FLUSH, VoteResult.ACTUATOR_FAILED): VoteMessages.FLUSH_FAILED,
    }

    @classmethod
    def result_for(cls, error: VotingError) -> VoteResult:
        """Map a rejected or failed ballot onto its result."""
        for error_type in type(error).__mro__:
            result = cls._RESULTS.get(error_type)
            if result is not None:
                return result
        return VoteResult.ERROR

    @classmethod
    def rejection_message(cls, vote_type: VoteType, error: VotingError, user: str) -> str:
        """Chat text telling ``user`` why their ballot did not count."""
        result = cls.result_for(error)
        template = cls._REJECTIONS.get((vote_type, result))
        if template is None:
            return VoteMessages.UNEXPECTED_ERROR
        return template.format(user=user, cap=getattr(error, "cap", ""))

    @staticmethod
    def promotion_destination(current: QueueItem | None) -> int:
        """Slot a promoted track should move to so that it plays next."""
        if current is None:
            return 0
        return current.slot_index + 1

    @staticmethod
    def find_slot(queue: Iterable[QueueItem], slot_index: int) -> QueueItem | None:
        for item in queue:
            if item.slot_index == slot_index:
                return item
        return None

    @classmethod
    def status_lines(
        cls,
        slots: Mapping[int, SlotTally],
        queue: Iterable[QueueItem],
        needed: int,
    ) -> list[str]:
        """One line per voted slot, matched against a fresh queue snapshot."""
        by_slot = {item.slot_index: item for item in queue}
        lines = []
        for index, slot in slots.items():
            item = by_slot.get(index)
            if item is None:
                lines.append(
                    VoteMessages.VOTE_STATUS_UNKNOWN_LINE.format(
                        slot=index, votes=slot.tally, needed=needed
                    )
                )
                continue
            lines.append(
                VoteMessages.VOTE_STATUS_LINE.format(
                    slot=index,
                    title=item.title,
                    artist=item.artist or "unknown",
                    votes=slot.tally,
                    needed=needed,
                )
            )
        return lines

    @staticmethod
    def immune_listing(tracks: Iterable[TrackRef]) -> str:
        lines = [track.display_name for track in tracks]
        if not lines:
            return VoteMessages.IMMUNE_LIST_EMPTY
        return "\n".join([VoteMessages.IMMUNE_LIST_HEADER, *lines])

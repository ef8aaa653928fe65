"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the voting engine is defined here once,
so models can simply annotate their fields::

    from jukebox_voting.domain.shared.types import QuorumLimit, SlotIndex

    class MyModel(BaseModel):
        slot: SlotIndex
        limit: QuorumLimit
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""


# ── Voting constraints ──────────────────────────────────────────────

SlotIndex = Annotated[int, Field(ge=0)]
"""Zero-based position in the live playback queue."""

QuorumLimit = Annotated[int, Field(ge=1, le=20)]
"""Ballots needed to decide a topic: 1 … 20."""

VoteWindowMinutes = Annotated[int, Field(ge=1, le=60)]
"""Flush voting window length in minutes: 1 … 60."""

PerUserCap = Annotated[int, Field(ge=1)]
"""Ballots a single user may contribute to one table: >= 1."""

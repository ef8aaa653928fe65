"""Set of track identities protected from the skip-vote."""

from __future__ import annotations

import logging
from collections import defaultdict

from jukebox_voting.domain.shared.messages import LogTemplates
from jukebox_voting.domain.tracks.value_objects import TrackRef

logger = logging.getLogger(__name__)


class ImmunityRegistry:
    """Grow-only registry of immune tracks, kept for the process lifetime.

    Entries are keyed by ``TrackRef.key``. A reference that carries no artist
    (a bare title) matches any registered track with the same title, and a
    registered bare title matches every artist, so callers that only know
    the title see the same answer as callers holding a full reference.
    """

    def __init__(self) -> None:
        self._tracks: dict[str, TrackRef] = {}
        self._artists_by_title: dict[str, set[str]] = defaultdict(set)

    def __len__(self) -> int:
        return len(self._tracks)

    def __contains__(self, ref: object) -> bool:
        return self.contains(ref)

    def contains(self, ref: object, artist: str | None = None) -> bool:
        track = TrackRef.from_any(ref, artist)
        if track.is_empty:
            return False
        artists = self._artists_by_title.get(track.title_key)
        if not artists:
            return False
        return not track.artist_key or track.artist_key in artists or "" in artists

    def ban(self, ref: object, artist: str | None = None) -> bool:
        """Mark a track immune. Returns False if it already was."""
        track = TrackRef.from_any(ref, artist)
        if track.is_empty or track.key in self._tracks:
            return False
        self._tracks[track.key] = track
        self._artists_by_title[track.title_key].add(track.artist_key)
        logger.info(LogTemplates.TRACK_BANNED, track.display_name)
        return True

    def tracks(self) -> list[TrackRef]:
        """Immune tracks in the order they were protected."""
        return list(self._tracks.values())

"""Immutable value objects for track identity."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from jukebox_voting.domain.shared.types import SlotIndex

KEY_SEPARATOR = "|"


def normalize(value: object) -> str:
    """Lower-case, trim and collapse internal whitespace."""
    if value is None:
        return ""
    return " ".join(str(value).split()).lower()


@dataclass(frozen=True)
class TrackRef:
    """Canonical reference to a track, derived from whatever the caller had at hand.

    Two references describe the same track when their ``key`` values match.
    The key is ``normalize(title) | normalize(artist)``; the URI is carried for
    display and queue lookups but never takes part in identity.
    """

    title: str = ""
    artist: str = ""
    uri: str = ""

    @property
    def title_key(self) -> str:
        return normalize(self.title)

    @property
    def artist_key(self) -> str:
        return normalize(self.artist)

    @property
    def key(self) -> str:
        return f"{self.title_key}{KEY_SEPARATOR}{self.artist_key}"

    @property
    def is_empty(self) -> bool:
        return not self.title_key

    @property
    def display_name(self) -> str:
        title = self.title.strip() or "(unknown)"
        artist = self.artist.strip()
        return f"{title} — {artist}" if artist else title

    def __str__(self) -> str:
        return self.title.strip()

    @classmethod
    def from_any(cls, ref: object, artist: str | None = None) -> TrackRef:
        """Build a reference from a bare title, a mapping, or an object with attributes.

        Unknown shapes degrade to ``str(ref)`` used as the title.
        """
        if ref is None:
            return cls()
        if isinstance(ref, TrackRef):
            return ref
        if isinstance(ref, str):
            return cls(title=ref.strip(), artist=(artist or "").strip())
        if isinstance(ref, Mapping):
            return cls(
                title=_as_text(ref.get("title")),
                artist=_as_text(ref.get("artist", artist)),
                uri=_as_text(ref.get("uri")),
            )
        if hasattr(ref, "title"):
            return cls(
                title=_as_text(getattr(ref, "title", None)),
                artist=_as_text(getattr(ref, "artist", artist)),
                uri=_as_text(getattr(ref, "uri", None)),
            )
        return cls(title=_as_text(ref), artist=(artist or "").strip())


def _as_text(value: object) -> str:
    return "" if value is None else str(value).strip()


def key_of(ref: object, artist: str | None = None) -> str:
    """Return the canonical comparison key for any track reference."""
    return TrackRef.from_any(ref, artist).key


class QueueItem(BaseModel):
    """One row of a queue snapshot."""

    model_config = ConfigDict(frozen=True)

    slot_index: SlotIndex
    title: str = ""
    artist: str = ""
    uri: str = ""

    @property
    def ref(self) -> TrackRef:
        return TrackRef(title=self.title, artist=self.artist, uri=self.uri)

    @property
    def key(self) -> str:
        return self.ref.key

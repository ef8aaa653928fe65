"""
Tracks Bounded Context

Normalizes heterogeneous track references into one comparison key.
"""

from jukebox_voting.domain.tracks.value_objects import QueueItem, TrackRef, key_of, normalize

__all__ = [
    # Value Objects
    "TrackRef",
    "QueueItem",
    # Helpers
    "key_of",
    "normalize",
]

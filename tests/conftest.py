import asyncio

import pytest

from jukebox_voting.application.interfaces.messenger import Messenger, UserActionLog
from jukebox_voting.application.interfaces.queue import QueueActuator, QueueSnapshot
from jukebox_voting.application.interfaces.scheduler import ScheduledHandle, Scheduler
from jukebox_voting.domain.tracks.value_objects import QueueItem

FILLER_URI = "spotify:track:filler"
FILLER_TITLE = "Gong 1"

# ============================================================================
# Collaborator Fakes
# ============================================================================


class FakeQueue(QueueSnapshot, QueueActuator):
    """In-memory playback queue that records every actuator call.

    ``fail_on`` holds method names that should raise RuntimeError.
    """

    def __init__(self, tracks=None, current=0):
        self.items: list[dict[str, str]] = [
            {"title": title, "artist": artist, "uri": f"uri:{title.lower().replace(' ', '-')}"}
            for title, artist in (tracks or [])
        ]
        self.current: int | None = current if self.items else None
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def _maybe_fail(self, name):
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    def play(self, slot):
        self.current = slot

    def stop(self):
        self.current = None

    # --- QueueSnapshot ---

    async def get_queue(self):
        self._maybe_fail("get_queue")
        return [QueueItem(slot_index=i, **item) for i, item in enumerate(self.items)]

    async def get_current_track(self):
        self._maybe_fail("get_current_track")
        if self.current is None or self.current >= len(self.items):
            return None
        return QueueItem(slot_index=self.current, **self.items[self.current])

    # --- QueueActuator ---

    async def skip(self):
        self.calls.append(("skip",))
        self._maybe_fail("skip")
        if self.current is not None:
            self.current += 1
            if self.current >= len(self.items):
                self.current = None

    async def reorder(self, slot, destination):
        self.calls.append(("reorder", slot, destination))
        self._maybe_fail("reorder")
        item = self.items.pop(slot)
        if destination > slot:
            destination -= 1
        self.items.insert(destination, item)

    async def flush(self):
        self.calls.append(("flush",))
        self._maybe_fail("flush")
        self.items.clear()
        self.current = None

    async def insert_after_current(self, uri):
        self.calls.append(("insert_after_current", uri))
        self._maybe_fail("insert_after_current")
        position = 0 if self.current is None else self.current + 1
        self.items.insert(position, {"title": FILLER_TITLE, "artist": "", "uri": uri})

    async def remove(self, slot):
        self.calls.append(("remove", slot))
        self._maybe_fail("remove")
        self.items.pop(slot)
        if self.current is not None and slot < self.current:
            self.current -= 1

    def called(self, name):
        return [call for call in self.calls if call[0] == name]


class RecordingMessenger(Messenger):
    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    async def send(self, text, channel_id):
        if self.fail:
            raise RuntimeError("chat is down")
        self.sent.append((text, channel_id))

    @property
    def texts(self):
        return [text for text, _ in self.sent]

    def contains(self, fragment):
        return any(fragment in text for text in self.texts)


class RecordingActionLog(UserActionLog):
    def __init__(self):
        self.actions: list[tuple[str, str]] = []
        self.fail = False

    async def record(self, user, action):
        if self.fail:
            raise RuntimeError("action log is down")
        self.actions.append((user, action))


class ManualHandle(ScheduledHandle):
    def __init__(self, name, when, callback):
        self.name = name
        self.when = when
        self.callback = callback
        self.fired = False
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self):
        return self._cancelled


class ManualScheduler(Scheduler):
    """Scheduler driven by ``advance`` instead of wall-clock time."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[ManualHandle] = []

    def call_later(self, delay_seconds, callback, *, name):
        handle = ManualHandle(name, self.now + delay_seconds, callback)
        self.handles.append(handle)
        return handle

    def pending(self, name=None):
        return [
            h
            for h in self.handles
            if not h.cancelled and not h.fired and (name is None or h.name == name)
        ]

    async def advance(self, seconds):
        self.now += seconds
        due = sorted((h for h in self.pending() if h.when <= self.now), key=lambda h: h.when)
        for handle in due:
            if handle.cancelled:
                continue
            handle.fired = True
            result = handle.callback()
            if asyncio.iscoroutine(result):
                await result


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def queue():
    """Queue playing slot 0 with five more tracks behind it."""
    return FakeQueue(
        [
            ("Song X", "Artist X"),
            ("Song A", "Artist A"),
            ("Song B", "Artist B"),
            ("Song C", "Artist C"),
            ("Song D", "Artist D"),
            ("Song E", "Artist E"),
        ],
        current=0,
    )


@pytest.fixture
def messenger():
    return RecordingMessenger()


@pytest.fixture
def action_log():
    return RecordingActionLog()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def fanfare_settings():
    from jukebox_voting.config.settings import FanfareSettings

    return FanfareSettings(
        filler_uri=FILLER_URI, filler_title=FILLER_TITLE, filler_duration_seconds=12
    )


@pytest.fixture
def config_provider():
    from jukebox_voting.config.runtime import SettingsConfigProvider
    from jukebox_voting.config.settings import VotingSettings

    return SettingsConfigProvider(
        VotingSettings(gong_limit=3, vote_limit=3, vote_immune_limit=2, flush_vote_limit=2)
    )


@pytest.fixture
def fanfare(queue, scheduler, fanfare_settings):
    from jukebox_voting.application.services.gong_fanfare import GongFanfare

    return GongFanfare(
        queue_snapshot=queue,
        queue_actuator=queue,
        scheduler=scheduler,
        settings=fanfare_settings,
    )


@pytest.fixture
def make_engine(config_provider, queue, messenger, scheduler, fanfare, action_log):
    """Factory so tests can override collaborators or cap scopes."""
    from jukebox_voting.application.services.voting_engine import VotingEngine

    def _make(**overrides):
        kwargs = dict(
            config=config_provider,
            queue_snapshot=queue,
            queue_actuator=queue,
            messenger=messenger,
            scheduler=scheduler,
            fanfare=fanfare,
            user_action_log=action_log,
        )
        kwargs.update(overrides)
        return VotingEngine(**kwargs)

    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()

"""
Unit Tests for GongFanfare

Tests for:
- Filler insertion followed by a skip
- Fallback to a plain skip
- Scheduled filler removal
"""

import logging

import pytest

from jukebox_voting.application.services.gong_fanfare import FILLER_REMOVAL_TASK
from jukebox_voting.domain.shared.exceptions import ActuatorFailureError


class TestSkipWithFanfare:
    @pytest.mark.asyncio
    async def test_inserts_filler_then_skips(self, fanfare, queue):
        await fanfare.skip_with_fanfare()

        assert queue.calls == [("insert_after_current", "spotify:track:filler"), ("skip",)]
        assert queue.items[queue.current]["title"] == "Gong 1"

    @pytest.mark.asyncio
    async def test_schedules_removal(self, fanfare, scheduler):
        await fanfare.skip_with_fanfare()

        [handle] = scheduler.pending()
        assert handle.name == FILLER_REMOVAL_TASK
        assert handle.when == 12

    @pytest.mark.asyncio
    async def test_removal_runs_after_duration(self, fanfare, queue, scheduler):
        await fanfare.skip_with_fanfare()

        await scheduler.advance(11)
        assert queue.called("remove") == []

        await scheduler.advance(1)
        assert queue.called("remove") == [("remove", 1)]
        assert [item["title"] for item in queue.items][:2] == ["Song X", "Song A"]

    @pytest.mark.asyncio
    async def test_insert_failure_falls_back(self, fanfare, queue, scheduler, caplog):
        queue.fail_on = {"insert_after_current"}

        with caplog.at_level(logging.WARNING, logger="jukebox_voting"):
            await fanfare.skip_with_fanfare()

        assert queue.called("skip") == [("skip",)]
        assert scheduler.pending() == []
        assert caplog.records

    @pytest.mark.asyncio
    async def test_skip_after_filler_failure_retries_plain_skip(self, fanfare, queue, scheduler):
        """A failing first skip is retried once, and the inserted filler is still removed."""
        attempts = []
        original_skip = queue.skip

        async def flaky_skip():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("player busy")
            await original_skip()

        queue.skip = flaky_skip

        await fanfare.skip_with_fanfare()

        assert len(attempts) == 2
        assert [h.name for h in scheduler.pending()] == [FILLER_REMOVAL_TASK]

        await scheduler.advance(12)

        assert "Gong 1" not in [item["title"] for item in queue.items]

    @pytest.mark.asyncio
    async def test_total_failure_raises(self, fanfare, queue, scheduler):
        queue.fail_on = {"insert_after_current", "skip"}

        with pytest.raises(ActuatorFailureError) as exc_info:
            await fanfare.skip_with_fanfare()

        assert exc_info.value.action == "skip"
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert scheduler.pending() == []

    @pytest.mark.asyncio
    async def test_skip_failure_after_insert_still_removes_filler(self, fanfare, queue, scheduler):
        queue.fail_on = {"skip"}

        with pytest.raises(ActuatorFailureError):
            await fanfare.skip_with_fanfare()

        assert queue.called("skip") == [("skip",), ("skip",)]
        assert scheduler.pending(FILLER_REMOVAL_TASK)

        await scheduler.advance(12)

        assert "Gong 1" not in [item["title"] for item in queue.items]
        assert queue.items[queue.current]["title"] == "Song X"


class TestRemoveFiller:
    @pytest.mark.asyncio
    async def test_matches_by_title(self, fanfare, queue):
        queue.items.insert(3, {"title": "Gong 1", "artist": "", "uri": "spotify:track:other"})

        await fanfare.remove_filler()

        assert queue.called("remove") == [("remove", 3)]

    @pytest.mark.asyncio
    async def test_nothing_to_remove(self, fanfare, queue):
        await fanfare.remove_filler()
        assert queue.called("remove") == []

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, fanfare, queue, caplog):
        queue.fail_on = {"get_queue"}

        with caplog.at_level(logging.WARNING, logger="jukebox_voting"):
            await fanfare.remove_filler()

        assert any("get_queue failed" in r.getMessage() for r in caplog.records)

"""Tests for AsyncioScheduler and LoggingUserActionLog."""

import asyncio
import logging

import pytest

from jukebox_voting.infrastructure import AsyncioScheduler, LoggingUserActionLog


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_runs_sync_callback(self):
        scheduler = AsyncioScheduler()
        fired = asyncio.Event()

        handle = scheduler.call_later(0.01, fired.set, name="sync")

        await asyncio.wait_for(fired.wait(), timeout=1)
        assert handle.name == "sync"
        assert handle.cancelled is False

    @pytest.mark.asyncio
    async def test_runs_coroutine_callback(self):
        scheduler = AsyncioScheduler()
        fired = asyncio.Event()

        async def callback():
            fired.set()

        scheduler.call_later(0, callback, name="async")

        await asyncio.wait_for(fired.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_cancel_prevents_callback(self):
        scheduler = AsyncioScheduler()
        calls = []

        handle = scheduler.call_later(0.01, lambda: calls.append(1), name="cancelled")
        handle.cancel()
        await asyncio.sleep(0.05)

        assert calls == []
        assert handle.cancelled is True

    @pytest.mark.asyncio
    async def test_negative_delay_runs_immediately(self):
        scheduler = AsyncioScheduler()
        fired = asyncio.Event()

        scheduler.call_later(-5, fired.set, name="late")

        await asyncio.wait_for(fired.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_callback_errors_are_logged(self, caplog):
        scheduler = AsyncioScheduler()
        done = asyncio.Event()

        def sync_boom():
            raise RuntimeError("sync boom")

        async def async_boom():
            done.set()
            raise RuntimeError("async boom")

        with caplog.at_level(logging.ERROR, logger="jukebox_voting"):
            scheduler.call_later(0, sync_boom, name="sync-boom")
            scheduler.call_later(0, async_boom, name="async-boom")
            await asyncio.wait_for(done.wait(), timeout=1)
            await asyncio.sleep(0.01)

        messages = [r.getMessage() for r in caplog.records]
        assert any("sync-boom" in m for m in messages)
        assert any("async-boom" in m for m in messages)
        assert scheduler.pending_tasks == 0

    @pytest.mark.asyncio
    async def test_close_cancels_running_tasks(self):
        scheduler = AsyncioScheduler()
        started = asyncio.Event()

        async def slow():
            started.set()
            await asyncio.sleep(10)

        scheduler.call_later(0, slow, name="slow")
        await asyncio.wait_for(started.wait(), timeout=1)
        assert scheduler.pending_tasks == 1

        await scheduler.close()

        assert scheduler.pending_tasks == 0


class TestLoggingUserActionLog:
    @pytest.mark.asyncio
    async def test_record_logs_action(self, caplog):
        with caplog.at_level(logging.INFO, logger="jukebox_voting"):
            await LoggingUserActionLog().record("alice", "gong")

        assert any("alice" in r.getMessage() and "gong" in r.getMessage() for r in caplog.records)

"""
Tests for the background flow sweep.
"""

import asyncio
import time
from unittest.mock import MagicMock

import pytest

from app.services import FlowRelay, MemoryFlowStore
from app.services.flow_cleanup import FlowCleanupTask, run_cleanup_task, sweep_in_thread


async def _wait_until(predicate, timeout: float = 1.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


class TestSweepInThread:
    """Tests for sweep_in_thread."""

    @pytest.mark.asyncio
    async def test_removes_expired_flows(self, relay: FlowRelay, store: MemoryFlowStore, clock):
        """Removes expired outcomes and reports how many."""
        for i in range(3):
            relay.report(f"expired-{i}", code="xyz")
        clock.advance(minutes=15)

        assert await sweep_in_thread(relay) == 3
        assert store.count() == 0

    @pytest.mark.asyncio
    async def test_keeps_fresh_flows(self, relay: FlowRelay, store: MemoryFlowStore):
        """Fresh outcomes survive."""
        relay.report("fresh", code="xyz")

        assert await sweep_in_thread(relay) == 0
        assert store.get("fresh") is not None


class TestRunCleanupTask:
    """Tests for run_cleanup_task loop."""

    @pytest.mark.asyncio
    async def test_exits_without_sweeping_when_already_stopped(self):
        """Task returns at once if stop_event is already set."""
        relay = MagicMock()
        stop_event = asyncio.Event()
        stop_event.set()

        await asyncio.wait_for(
            run_cleanup_task(relay=relay, stop_event=stop_event, interval_seconds=10),
            timeout=0.5,
        )

        relay.sweep.assert_not_called()

    @pytest.mark.asyncio
    async def test_sweeps_each_interval(self, relay: FlowRelay, store: MemoryFlowStore, clock):
        """Expired outcomes are removed on the interval."""
        relay.report("abc", code="xyz")
        clock.advance(minutes=15)
        stop_event = asyncio.Event()

        task = asyncio.create_task(
            run_cleanup_task(relay=relay, stop_event=stop_event, interval_seconds=0.01)
        )
        await _wait_until(lambda: store.count() == 0)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_retries_after_failed_sweep(self):
        """A failed sweep is logged and the next tick sweeps again."""
        relay = MagicMock()
        relay.sweep.side_effect = [RuntimeError("boom"), 0, 0, 0]
        stop_event = asyncio.Event()

        task = asyncio.create_task(
            run_cleanup_task(relay=relay, stop_event=stop_event, interval_seconds=0.01)
        )
        await _wait_until(lambda: relay.sweep.call_count >= 2)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_stops_promptly_after_failed_sweep(self):
        """Setting stop_event right after a failure ends the task without waiting an interval."""
        failed_at = []

        def failing_sweep():
            failed_at.append(time.monotonic())
            raise RuntimeError("boom")

        relay = MagicMock()
        relay.sweep.side_effect = failing_sweep
        stop_event = asyncio.Event()

        task = asyncio.create_task(
            run_cleanup_task(relay=relay, stop_event=stop_event, interval_seconds=1.0)
        )
        await _wait_until(lambda: failed_at, timeout=2.0)
        stop_event.set()
        await asyncio.wait_for(task, timeout=2.0)

        assert time.monotonic() - failed_at[0] < 0.5
        assert relay.sweep.call_count == 1

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        """Cancelling the task raises CancelledError."""
        task = asyncio.create_task(
            run_cleanup_task(relay=MagicMock(), stop_event=asyncio.Event(), interval_seconds=10)
        )
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task


class TestFlowCleanupTask:
    """Tests for FlowCleanupTask."""

    def test_rejects_non_positive_interval(self, relay: FlowRelay):
        """Interval must be positive."""
        with pytest.raises(ValueError):
            FlowCleanupTask(relay, interval_seconds=0)

    @pytest.mark.asyncio
    async def test_start_and_stop(self, relay: FlowRelay, store: MemoryFlowStore, clock):
        """start() sweeps in the background and stop() ends the task."""
        relay.report("abc", code="xyz")
        clock.advance(minutes=15)
        cleanup = FlowCleanupTask(relay, interval_seconds=0.01)

        cleanup.start()
        assert cleanup.running
        await _wait_until(lambda: store.count() == 0)
        await asyncio.wait_for(cleanup.stop(), timeout=1)

        assert not cleanup.running

    @pytest.mark.asyncio
    async def test_stop_is_prompt_with_long_interval(self, relay: FlowRelay):
        """stop() does not wait out the interval."""
        cleanup = FlowCleanupTask(relay, interval_seconds=60)
        cleanup.start()
        await asyncio.sleep(0)

        started = time.monotonic()
        await asyncio.wait_for(cleanup.stop(), timeout=1)

        assert time.monotonic() - started < 0.5

    @pytest.mark.asyncio
    async def test_stop_without_start(self, relay: FlowRelay):
        """stop() is a no-op before start()."""
        await FlowCleanupTask(relay).stop()

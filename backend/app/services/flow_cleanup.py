"""
Timer-driven sweeping of expired flow outcomes.

Requests already sweep before reading or writing, but a relay that stops
receiving traffic would otherwise hold its last outcomes forever.
FlowCleanupTask sweeps on a fixed interval for the lifetime of the app.
"""

import asyncio
import logging

from app.services.flow_relay import FlowRelay

logger = logging.getLogger(__name__)

DEFAULT_CLEANUP_INTERVAL_SECONDS = 60


async def sweep_in_thread(relay: FlowRelay) -> int:
    """
    Sweep the relay from a worker thread.

    The store guards its records with a threading lock, which must not be
    waited on from the event loop while a request thread holds it.
    """
    return await asyncio.to_thread(relay.sweep)


async def _stop_requested(stop_event: asyncio.Event, timeout: float) -> bool:
    """Wait up to timeout for stop_event; True if it was set."""
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        return False
    return True


async def run_cleanup_task(
    *,
    relay: FlowRelay,
    stop_event: asyncio.Event,
    interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
) -> None:
    """
    Sweep every interval_seconds until stop_event is set.

    A failed sweep is logged and retried on the next tick. The stop event is
    honoured during every wait, so shutdown never waits out an interval.
    """
    logger.info("Flow cleanup task started (interval: %s seconds)", interval_seconds)

    while not await _stop_requested(stop_event, interval_seconds):
        try:
            removed = await sweep_in_thread(relay)
        except Exception:
            logger.exception("Background flow sweep failed")
            continue
        logger.debug("Background flow sweep removed %d outcomes", removed)

    logger.info("Flow cleanup task stopped")


class FlowCleanupTask:
    """Owns the background sweep for one relay: start() on startup, stop() on shutdown."""

    def __init__(
        self,
        relay: FlowRelay,
        interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("Cleanup interval must be positive")
        self.relay = relay
        self.interval_seconds = interval_seconds
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(
            run_cleanup_task(
                relay=self.relay,
                stop_event=self._stop_event,
                interval_seconds=self.interval_seconds,
            ),
            name="flow-cleanup",
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None

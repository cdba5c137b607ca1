"""The live cycle scheduler that drives periodic screen ingestion.

Ties together screen capture, thumbnail deduplication, mode-based queue
routing and the downstream processing hook on a fixed interval.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from pathlib import Path
from typing import Awaitable, Callable

from livesense.capture.base import NullWindowController, ScreenCaptureSource, WindowController
from livesense.domain.models import CaptureArtifact, CycleOutcome, DedupDecision, QueueName
from livesense.pipeline.context import LiveContext

logger = logging.getLogger(__name__)

ProcessCallback = Callable[[QueueName], Awaitable[None]]

DEFAULT_INTERVAL = 8.0
DEFAULT_SETTLE_DELAY = 0.1


class SchedulerState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class LiveCycleScheduler:
    """Runs the capture -> dedup -> route -> process cycle on a timer.

    ``start()`` runs one cycle immediately and then one per interval until
    ``stop()``. Cycles never overlap: a tick that finds the previous cycle
    still running is skipped. Stopping only prevents future cycles; a
    cycle already in flight runs to completion.

    Every exception inside a cycle is logged and swallowed so a single bad
    capture never kills the loop; the next tick is the retry.
    """

    def __init__(
        self,
        context: LiveContext,
        capture: ScreenCaptureSource,
        window: WindowController | None = None,
        process: ProcessCallback | None = None,
        interval: float = DEFAULT_INTERVAL,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Cycle interval must be positive, got {interval}")
        self._context = context
        self._capture = capture
        self._window = window or NullWindowController()
        self._process = process
        self._interval = interval
        self._settle_delay = settle_delay
        self._state = SchedulerState.IDLE
        self._timer: asyncio.Task | None = None
        self._cycle: asyncio.Task | None = None
        self.cycles_run = 0
        self.ticks_skipped = 0
        self.last_outcome: CycleOutcome | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    @property
    def cycle_in_flight(self) -> bool:
        return self._cycle is not None and not self._cycle.done()

    @property
    def interval(self) -> float:
        return self._interval

    async def start(self) -> bool:
        """Start the live loop. Returns False if it was already running."""
        if self._state is SchedulerState.RUNNING:
            logger.debug("Live mode already running")
            return False
        self._state = SchedulerState.RUNNING
        self._timer = asyncio.create_task(self._run_timer())
        logger.info("Live mode started (interval %.1fs)", self._interval)
        return True

    async def stop(self) -> None:
        """Disarm the timer. An in-flight cycle is left to finish."""
        if self._state is SchedulerState.IDLE:
            return
        self._state = SchedulerState.IDLE
        if self._timer is not None:
            self._timer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._timer
            self._timer = None
        logger.info("Live mode stopped after %d cycles", self.cycles_run)

    async def wait_idle(self) -> None:
        """Wait for the in-flight cycle, if any, to finish."""
        if self._cycle is not None:
            await asyncio.shield(self._cycle)

    async def capture_now(self) -> CycleOutcome:
        """Run one cycle on demand, unless one is already in flight."""
        task = self._launch_cycle()
        if task is None:
            return CycleOutcome.SKIPPED
        return await task

    async def run_cycle(self) -> CycleOutcome:
        """Execute a single capture cycle and report how it ended."""
        try:
            outcome = await self._cycle_body()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Live cycle failed")
            outcome = CycleOutcome.FAILED
        self.cycles_run += 1
        self.last_outcome = outcome
        return outcome

    async def __aenter__(self) -> LiveCycleScheduler:
        await self.start()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.stop()

    async def _run_timer(self) -> None:
        while True:
            self._launch_cycle()
            await asyncio.sleep(self._interval)

    def _launch_cycle(self) -> asyncio.Task | None:
        if self.cycle_in_flight:
            self.ticks_skipped += 1
            logger.debug("Previous cycle still running, skipping tick")
            return None
        self._cycle = asyncio.create_task(self.run_cycle())
        return self._cycle

    async def _cycle_body(self) -> CycleOutcome:
        # Sample the mode once so the capture directory and queue agree
        mode = self._context.mode
        path = await self._capture_hidden(self._context.directory_for(mode))

        decision = await self._context.deduplicator.check(path)
        if decision is DedupDecision.UNCHANGED:
            return CycleOutcome.UNCHANGED

        queue = self._context.queue_for(mode)
        queue.push(CaptureArtifact(path=path, queue=queue.name))

        if self._process is not None:
            await self._process(queue.name)
        return CycleOutcome.QUEUED

    async def _capture_hidden(self, target_dir: Path) -> Path:
        self._window.hide_window()
        try:
            await asyncio.sleep(self._settle_delay)
            return await self._capture.capture_screen(target_dir)
        finally:
            self._window.show_window()

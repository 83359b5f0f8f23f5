from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable

from ratefire.loadgen.termination import TerminationController
from ratefire.metrics import StatsAggregator, StopReason

logger = logging.getLogger(__name__)

Launch = Callable[[], Awaitable[Any]]


class DispatcherState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


def tick_interval_us(requests_per_second: int) -> int:
    if requests_per_second <= 0:
        msg = f"requests_per_second must be positive, got {requests_per_second}"
        raise ValueError(msg)
    return 1_000_000 // requests_per_second


class Dispatcher:
    """Fires one request task per tick until the cap is seen or the run ends.

    Launched tasks are never awaited here. They hold their own reference to
    the shared statistics and may finish long after the tick that started
    them, including after the dispatcher has stopped.
    """

    def __init__(
        self,
        max_requests: int,
        requests_per_second: int,
        stats: StatsAggregator,
        termination: TerminationController,
        launch: Launch,
    ) -> None:
        self.max_requests = max_requests
        self.interval_sec = tick_interval_us(requests_per_second) / 1_000_000
        self.state = DispatcherState.RUNNING
        self.dispatched = 0
        self._stats = stats
        self._termination = termination
        self._launch = launch
        self._in_flight: set[asyncio.Task[Any]] = set()

    @property
    def in_flight(self) -> set[asyncio.Task[Any]]:
        return set(self._in_flight)

    def stop(self) -> None:
        if self.state is DispatcherState.STOPPED:
            return
        self.state = DispatcherState.STOPPED
        logger.debug("dispatcher stopped after %d launches", self.dispatched)

    async def run(self) -> None:
        started = time.perf_counter()
        tick = 0
        while self.state is DispatcherState.RUNNING:
            if self._termination.triggered:
                self.stop()
                break
            # >= because in-flight tasks can push the count past the cap
            # between two ticks.
            if self._stats.count >= self.max_requests:
                self.stop()
                self._termination.trigger(StopReason.CAP_REACHED)
                break
            self._spawn()
            tick += 1
            await _sleep_until_time(started + tick * self.interval_sec)

    def _spawn(self) -> None:
        task = asyncio.create_task(self._launch())
        self._in_flight.add(task)
        task.add_done_callback(self._task_done)
        self.dispatched += 1

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("request task failed", exc_info=exc)


async def _sleep_until_time(target: float) -> None:
    delay = max(0.0, target - time.perf_counter())
    await asyncio.sleep(delay)

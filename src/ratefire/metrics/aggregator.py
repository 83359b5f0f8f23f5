from __future__ import annotations

import threading

from ratefire.metrics.models import StatsSnapshot


class StatsAggregator:
    """Running count, min, max and sum of request latencies.

    Every update and every read holds the same lock, so a snapshot never
    sees a sample that has been counted but not yet folded into min/max.
    """

    __slots__ = ("_lock", "_count", "_min", "_max", "_total")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0
        self._min: int | None = None
        self._max: int | None = None
        self._total = 0

    def add(self, elapsed_ms: int) -> None:
        with self._lock:
            if self._count == 0 or elapsed_ms < self._min:
                self._min = elapsed_ms
            if self._count == 0 or elapsed_ms > self._max:
                self._max = elapsed_ms
            self._total += elapsed_ms
            self._count += 1

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                count=self._count,
                min_ms=self._min,
                max_ms=self._max,
                total_ms=self._total,
            )

    @property
    def count(self) -> int:
        with self._lock:
            return self._count


class ErrorCounter:
    """Failure counter kept apart from StatsAggregator.

    Request tasks run on the event loop thread and an increment has no
    suspension point, so a plain int needs no lock and never waits behind
    the latency lock.
    """

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value = 0

    def increment(self) -> None:
        self._value += 1

    def read(self) -> int:
        return self._value

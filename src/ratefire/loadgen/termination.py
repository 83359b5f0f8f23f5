from __future__ import annotations

import asyncio
import logging
import signal
import time
from typing import Callable

from ratefire.metrics import ErrorCounter, RunResult, StatsAggregator, StopReason

logger = logging.getLogger(__name__)

Reporter = Callable[[RunResult], None]


class TerminationController:
    """Ends a run on whichever comes first: the request cap or an interrupt.

    ``trigger`` is one-shot. The first caller freezes the elapsed time and
    the statistics into a ``RunResult`` and hands it to the reporter; every
    later call is ignored.
    """

    def __init__(
        self,
        stats: StatsAggregator,
        errors: ErrorCounter,
        reporter: Reporter | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._stats = stats
        self._errors = errors
        self._reporter = reporter
        self._clock = clock
        self._started: float | None = None
        self._result: RunResult | None = None
        self._done = asyncio.Event()
        self._signals: list[signal.Signals] = []

    @property
    def triggered(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> RunResult | None:
        return self._result

    def start(self) -> None:
        self._started = self._clock()

    def trigger(self, reason: StopReason) -> bool:
        if self._result is not None:
            logger.debug("termination already done, ignoring %s", reason.value)
            return False
        started = self._started if self._started is not None else self._clock()
        elapsed = self._clock() - started
        self._result = RunResult(
            elapsed_sec=elapsed,
            stats=self._stats.snapshot(),
            error_count=self._errors.read(),
            reason=reason,
        )
        logger.info("run stopped: %s after %.2fs", reason.value, elapsed)
        try:
            if self._reporter is not None:
                self._reporter(self._result)
        finally:
            self._done.set()
        return True

    def interrupt(self) -> bool:
        return self.trigger(StopReason.INTERRUPTED)

    async def wait(self) -> RunResult:
        await self._done.wait()
        if self._result is None:
            msg = "termination event set without a result"
            raise RuntimeError(msg)
        return self._result

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        try:
            loop.add_signal_handler(signal.SIGINT, self.interrupt)
        except (NotImplementedError, RuntimeError):
            # Windows event loops and non-main threads cannot take handlers.
            logger.debug("signal handlers not supported here, Ctrl+C will not stop the run cleanly")
            return
        self._signals.append(signal.SIGINT)

    def remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        while self._signals:
            loop.remove_signal_handler(self._signals.pop())

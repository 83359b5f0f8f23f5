from __future__ import annotations

import asyncio
import os
import signal
import sys

import pytest

from ratefire.loadgen.termination import TerminationController
from ratefire.metrics import ErrorCounter, RunResult, StatsAggregator, StopReason


def test_trigger_is_one_shot() -> None:
    stats = StatsAggregator()
    stats.add(4)
    reports: list[RunResult] = []
    controller = TerminationController(stats, ErrorCounter(), reporter=reports.append)
    controller.start()
    assert controller.trigger(StopReason.CAP_REACHED)
    assert not controller.interrupt()
    assert len(reports) == 1
    assert reports[0].reason is StopReason.CAP_REACHED
    assert controller.result is reports[0]


def test_elapsed_measured_from_start() -> None:
    ticks = iter([10.0, 12.5])
    controller = TerminationController(StatsAggregator(), ErrorCounter(), clock=lambda: next(ticks))
    controller.start()
    controller.interrupt()
    assert controller.result is not None
    assert controller.result.elapsed_sec == pytest.approx(2.5)


def test_result_freezes_stats() -> None:
    stats = StatsAggregator()
    errors = ErrorCounter()
    stats.add(10)
    errors.increment()
    controller = TerminationController(stats, errors)
    controller.start()
    controller.interrupt()
    stats.add(30)
    errors.increment()
    result = controller.result
    assert result is not None
    assert result.count == 1
    assert result.error_count == 1
    assert result.error_percentage == 100.0


def test_wait_returns_after_interrupt() -> None:
    async def go() -> RunResult:
        controller = TerminationController(StatsAggregator(), ErrorCounter())
        controller.start()
        asyncio.get_running_loop().call_later(0.01, controller.interrupt)
        return await asyncio.wait_for(controller.wait(), timeout=2)

    result = asyncio.run(go())
    assert result.reason is StopReason.INTERRUPTED


def test_concurrent_triggers_report_once() -> None:
    reports: list[RunResult] = []

    async def go() -> None:
        controller = TerminationController(StatsAggregator(), ErrorCounter(), reporter=reports.append)
        controller.start()
        loop = asyncio.get_running_loop()
        loop.call_soon(controller.trigger, StopReason.CAP_REACHED)
        loop.call_soon(controller.interrupt)
        await controller.wait()
        await asyncio.sleep(0)

    asyncio.run(go())
    assert len(reports) == 1
    assert reports[0].reason is StopReason.CAP_REACHED


@pytest.mark.skipif(sys.platform == "win32", reason="needs unix signal handlers")
def test_sigint_interrupts() -> None:
    async def go() -> RunResult:
        loop = asyncio.get_running_loop()
        controller = TerminationController(StatsAggregator(), ErrorCounter())
        controller.install_signal_handlers(loop)
        try:
            controller.start()
            loop.call_later(0.01, os.kill, os.getpid(), signal.SIGINT)
            return await asyncio.wait_for(controller.wait(), timeout=2)
        finally:
            controller.remove_signal_handlers(loop)

    result = asyncio.run(go())
    assert result.reason is StopReason.INTERRUPTED


def test_failing_reporter_still_releases_waiters() -> None:
    def reporter(result: RunResult) -> None:
        raise BrokenPipeError("stdout closed")

    async def go() -> RunResult:
        controller = TerminationController(StatsAggregator(), ErrorCounter(), reporter=reporter)
        controller.start()
        with pytest.raises(BrokenPipeError):
            controller.trigger(StopReason.CAP_REACHED)
        assert not controller.interrupt()
        return await asyncio.wait_for(controller.wait(), timeout=2)

    result = asyncio.run(go())
    assert result.reason is StopReason.CAP_REACHED

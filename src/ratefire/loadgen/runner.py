from __future__ import annotations

import asyncio
import contextlib
import logging

import httpx

from ratefire.config import RunConfig
from ratefire.loadgen.client import execute_request
from ratefire.loadgen.dispatcher import Dispatcher
from ratefire.loadgen.termination import Reporter, TerminationController
from ratefire.metrics import ErrorCounter, RunResult, StatsAggregator

logger = logging.getLogger(__name__)


class LoadRunner:
    """One run: shared client, statistics, dispatcher and termination."""

    def __init__(
        self,
        config: RunConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        reporter: Reporter | None = None,
        handle_signals: bool = True,
    ) -> None:
        self.config = config
        self.stats = StatsAggregator()
        self.errors = ErrorCounter()
        self.termination = TerminationController(self.stats, self.errors, reporter)
        self._transport = transport
        self._handle_signals = handle_signals
        self._client: httpx.AsyncClient | None = None
        self.dispatcher = Dispatcher(
            max_requests=config.max_requests,
            requests_per_second=config.requests_per_second,
            stats=self.stats,
            termination=self.termination,
            launch=self._send_one,
        )

    async def _send_one(self) -> None:
        if self._client is None:
            msg = "request launched outside of LoadRunner.run"
            raise RuntimeError(msg)
        await execute_request(
            self._client,
            self.config.target_url,
            self.stats,
            self.errors,
            self.config.timeout_sec,
        )

    async def run(self) -> RunResult:
        loop = asyncio.get_running_loop()
        async with httpx.AsyncClient(transport=self._transport) as client:
            self._client = client
            if self._handle_signals:
                self.termination.install_signal_handlers(loop)
            try:
                logger.info(
                    "starting run against %s at %d rps, cap %d",
                    self.config.target_url,
                    self.config.requests_per_second,
                    self.config.max_requests,
                )
                self.termination.start()
                dispatch_task = asyncio.create_task(self.dispatcher.run())
                waiter = asyncio.create_task(self.termination.wait())
                await asyncio.wait({dispatch_task, waiter}, return_when=asyncio.FIRST_COMPLETED)
                if not self.termination.triggered:
                    # The dispatcher only returns after termination fired, so
                    # this surfaces its exception instead of waiting forever.
                    waiter.cancel()
                    await dispatch_task
                result = await waiter
                self.dispatcher.stop()
                dispatch_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await dispatch_task
            finally:
                if self._handle_signals:
                    self.termination.remove_signal_handlers(loop)
            # A second Ctrl+C while draining gets the default KeyboardInterrupt.
            await self._drain()
        return result

    async def _drain(self) -> None:
        pending = self.dispatcher.in_flight
        if not pending:
            return
        logger.info("waiting up to %.1fs for %d in-flight requests", self.config.drain_timeout_sec, len(pending))
        _, still_pending = await asyncio.wait(pending, timeout=self.config.drain_timeout_sec)
        if still_pending:
            logger.warning("abandoning %d in-flight requests", len(still_pending))
            for task in still_pending:
                task.cancel()
            await asyncio.gather(*still_pending, return_exceptions=True)


async def run_load(
    config: RunConfig,
    transport: httpx.AsyncBaseTransport | None = None,
    reporter: Reporter | None = None,
    handle_signals: bool = True,
) -> RunResult:
    runner = LoadRunner(config, transport=transport, reporter=reporter, handle_signals=handle_signals)
    return await runner.run()

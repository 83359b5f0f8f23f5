from __future__ import annotations

import time

import httpx

from ratefire.metrics import ErrorCounter, ErrorType, RequestOutcome, StatsAggregator


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000.0)


async def send_request(
    client: httpx.AsyncClient,
    url: str,
    timeout: float | None = None,
) -> RequestOutcome:
    request_timeout = httpx.USE_CLIENT_DEFAULT if timeout is None else timeout
    start = time.perf_counter()
    try:
        resp = await client.get(url, timeout=request_timeout)
    except httpx.TimeoutException:
        err = ErrorType.TIMEOUT
    except httpx.ConnectError:
        err = ErrorType.CONNECT
    except httpx.ReadError:
        err = ErrorType.READ
    except httpx.HTTPError:
        err = ErrorType.OTHER
    else:
        elapsed = _elapsed_ms(start)
        if resp.is_success:
            return RequestOutcome(elapsed_ms=elapsed, succeeded=True, status_code=resp.status_code)
        return RequestOutcome(
            elapsed_ms=elapsed,
            succeeded=False,
            status_code=resp.status_code,
            error_type=ErrorType.STATUS,
        )
    return RequestOutcome(elapsed_ms=_elapsed_ms(start), succeeded=False, error_type=err)


async def execute_request(
    client: httpx.AsyncClient,
    url: str,
    stats: StatsAggregator,
    errors: ErrorCounter,
    timeout: float | None = None,
) -> RequestOutcome:
    outcome = await send_request(client, url, timeout)
    if not outcome.succeeded:
        errors.increment()
    stats.add(outcome.elapsed_ms)
    return outcome

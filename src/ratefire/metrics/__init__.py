from __future__ import annotations

from ratefire.metrics.aggregator import ErrorCounter, StatsAggregator
from ratefire.metrics.models import ErrorType, RequestOutcome, RunResult, StatsSnapshot, StopReason

__all__ = [
    "ErrorCounter",
    "ErrorType",
    "RequestOutcome",
    "RunResult",
    "StatsAggregator",
    "StatsSnapshot",
    "StopReason",
]

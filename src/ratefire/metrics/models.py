from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorType(str, Enum):
    TIMEOUT = "timeout"
    CONNECT = "connect"
    READ = "read"
    STATUS = "status"
    OTHER = "other"


class StopReason(str, Enum):
    CAP_REACHED = "cap_reached"
    INTERRUPTED = "interrupted"


@dataclass(frozen=True, slots=True)
class RequestOutcome:
    elapsed_ms: int
    succeeded: bool
    status_code: int | None = None
    error_type: ErrorType | None = None


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    """Consistent point-in-time view of the running latency statistics."""

    count: int = 0
    min_ms: int | None = None
    max_ms: int | None = None
    total_ms: int = 0

    @property
    def average_ms(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total_ms / self.count


@dataclass(frozen=True, slots=True)
class RunResult:
    elapsed_sec: float
    stats: StatsSnapshot
    error_count: int
    reason: StopReason

    @property
    def count(self) -> int:
        return self.stats.count

    @property
    def success_count(self) -> int:
        # Errors are read apart from the stats and may run slightly ahead.
        return max(0, self.stats.count - self.error_count)

    @property
    def error_percentage(self) -> float:
        if self.stats.count == 0:
            return 0.0
        return self.error_count / self.stats.count * 100.0

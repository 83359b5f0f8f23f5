from __future__ import annotations

from ratefire.config import RunConfig
from ratefire.metrics import RunResult


def format_start_info(config: RunConfig) -> str:
    return f"Target URL: {config.target_url}\nRequests per second: {config.requests_per_second}"


def format_result(result: RunResult) -> str:
    stats = result.stats
    lines = [
        f"Elapsed:             {result.elapsed_sec:.2f}s",
        f"Requests:            {result.count}",
        f" - Success:          {result.success_count}",
        f" - Errors:           {result.error_count}",
        f"Percent of errors:   {result.error_percentage:.2f}%",
        "Response time:",
        f" - Min:              {stats.min_ms or 0}ms",
        f" - Max:              {stats.max_ms or 0}ms",
        f" - Average:          {stats.average_ms:.2f}ms",
    ]
    return "\n".join(lines)


def print_result(result: RunResult) -> None:
    print("\n")
    print(format_result(result))

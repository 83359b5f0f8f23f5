from __future__ import annotations

import argparse
import asyncio
import logging

from ratefire.config import (
    DEFAULT_MAX_REQUESTS,
    DEFAULT_RPS,
    ConfigError,
    RunConfig,
    parse_target_url,
    resolve_positive,
)
from ratefire.loadgen.runner import run_load
from ratefire.report import format_start_info, print_result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ratefire",
        description="An application for automated stress testing of your APIs",
    )
    parser.add_argument("-u", "--url", default="", help="Target URL for benchmark")
    parser.add_argument(
        "-r",
        "--rps",
        type=int,
        default=DEFAULT_RPS,
        help=f"Number of requests per second. Default: {DEFAULT_RPS}",
    )
    parser.add_argument(
        "-m",
        "--max",
        type=int,
        default=DEFAULT_MAX_REQUESTS,
        help=f"Max number of requests. Default: {DEFAULT_MAX_REQUESTS}",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    parser.add_argument("--drain-timeout", type=float, default=5.0)
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    return parser


def build_config(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        target_url=parse_target_url(args.url),
        requests_per_second=resolve_positive(args.rps, DEFAULT_RPS),
        max_requests=resolve_positive(args.max, DEFAULT_MAX_REQUESTS),
        timeout_sec=args.timeout,
        drain_timeout_sec=args.drain_timeout,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ConfigError as exc:
        print(exc)
        return 1

    print(format_start_info(config))
    asyncio.run(run_load(config, reporter=print_result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

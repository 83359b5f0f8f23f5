from __future__ import annotations

from ratefire.config.models import (
    DEFAULT_MAX_REQUESTS,
    DEFAULT_RPS,
    ConfigError,
    RunConfig,
    parse_target_url,
    resolve_positive,
)

__all__ = [
    "DEFAULT_MAX_REQUESTS",
    "DEFAULT_RPS",
    "ConfigError",
    "RunConfig",
    "parse_target_url",
    "resolve_positive",
]

from __future__ import annotations

from dataclasses import dataclass

import httpx

DEFAULT_RPS = 1000
DEFAULT_MAX_REQUESTS = 10000


class ConfigError(ValueError):
    """Raised for input that must stop the program before a run starts."""


@dataclass(frozen=True, slots=True)
class RunConfig:
    target_url: str
    requests_per_second: int = DEFAULT_RPS
    max_requests: int = DEFAULT_MAX_REQUESTS
    timeout_sec: float | None = None  # None keeps the transport default
    drain_timeout_sec: float = 5.0

    def __post_init__(self) -> None:
        if self.requests_per_second <= 0:
            msg = f"requests_per_second must be positive, got {self.requests_per_second}"
            raise ConfigError(msg)
        if self.max_requests <= 0:
            msg = f"max_requests must be positive, got {self.max_requests}"
            raise ConfigError(msg)
        if self.timeout_sec is not None and self.timeout_sec <= 0:
            msg = f"timeout_sec must be positive, got {self.timeout_sec}"
            raise ConfigError(msg)
        if self.drain_timeout_sec < 0:
            msg = f"drain_timeout_sec must not be negative, got {self.drain_timeout_sec}"
            raise ConfigError(msg)


def resolve_positive(value: int | None, default: int) -> int:
    if value is None or value <= 0:
        return default
    return value


def parse_target_url(raw: str) -> str:
    url = (raw or "").strip()
    # Refuse to guess a target: an empty URL never falls back to anything.
    if not url:
        msg = "Target URL was not provided, use --help to know the usage of the application!"
        raise ConfigError(msg)
    lowered = url.lower()
    if lowered.startswith("https://"):
        msg = "The application does not support HTTPS yet!"
        raise ConfigError(msg)
    if not lowered.startswith("http://"):
        return parse_target_url(f"http://{url}")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        msg = f"Couldn't parse the given URL: {url}"
        raise ConfigError(msg) from exc
    if not parsed.host:
        msg = f"Couldn't parse the given URL: {url}"
        raise ConfigError(msg)
    return str(parsed)

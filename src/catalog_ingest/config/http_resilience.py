"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

type CacheBackend = Literal["sqlite", "memory"]
ShouldCacheHook = Callable[[object], bool]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Transport-level retries for network faults and 5xx responses.

    429 is deliberately absent from ``status_forcelist``: quota exhaustion is
    reported to the caller, which decides whether to cool down.
    """

    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ValueError("retry total must be non-negative")


NO_RETRY = RetryPolicy(total=0)


@dataclass(slots=True, frozen=True)
class RateLimit:
    """Token bucket: at most ``max_calls`` within any ``per_seconds`` window."""

    max_calls: int
    per_seconds: float

    def __post_init__(self) -> None:
        if self.max_calls < 1 or self.per_seconds <= 0:
            raise ValueError("rate limit needs max_calls >= 1 and a positive window")


@dataclass(slots=True, frozen=True)
class CacheConfig:
    enabled: bool = True
    backend: CacheBackend = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    # spacing between the end of one call and the start of the next
    min_interval_seconds: float | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(f"{self.name}: timeout_seconds must be positive")
        if self.min_interval_seconds is not None and self.min_interval_seconds < 0:
            raise ValueError(f"{self.name}: min_interval_seconds must be non-negative")

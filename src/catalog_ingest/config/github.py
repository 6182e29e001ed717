"""GitHub repository index configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .errors import UnsupportedValueError
from .http_resilience import NO_RETRY, CacheConfig, ResilienceConfig
from .storage import get_storage_config

DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"
DEFAULT_RAW_CONTENT_BASE_URL = "https://raw.githubusercontent.com"
DEFAULT_MIN_INTERVAL_SECONDS = 0.8
DEFAULT_USER_AGENT = "catalog-ingest/1.0"
DEFAULT_CACHE_TTL_SECONDS = 6 * 60 * 60


def cacheable_payload(payload: object) -> bool:
    """Partial search results are not worth replaying from cache."""

    return not (isinstance(payload, dict) and payload.get("incomplete_results"))


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    resilience: ResilienceConfig
    raw_content_base_url: str = DEFAULT_RAW_CONTENT_BASE_URL


def _cache_config() -> CacheConfig | None:
    """Read ``GITHUB_HTTP_CACHE``: ``memory`` (default), ``sqlite`` or ``off``.

    The sqlite cache lives in the data directory and lets re-runs replay detail,
    readme and manifest lookups instead of spending quota.
    """

    mode = (optional_env_var("GITHUB_HTTP_CACHE") or "memory").lower()
    match mode:
        case "off":
            return None
        case "memory":
            return CacheConfig(backend="memory", should_cache=cacheable_payload)
        case "sqlite":
            return CacheConfig(
                backend="sqlite",
                sqlite_path=str(get_storage_config().http_cache_path()),
                default_ttl_seconds=DEFAULT_CACHE_TTL_SECONDS,
                should_cache=cacheable_payload,
            )
        case _:
            raise UnsupportedValueError(
                "GITHUB_HTTP_CACHE", mode, allowed=("memory", "sqlite", "off")
            )


def get_github_config(*, min_interval_seconds: float | None = None) -> GitHubConfig:
    """Build the index configuration; ``GITHUB_TOKEN`` is optional but raises the quota."""

    token = optional_env_var("GITHUB_TOKEN")
    base_url = optional_env_var("GITHUB_API_BASE_URL") or DEFAULT_GITHUB_API_BASE_URL

    headers = {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "application/vnd.github+json",
    }
    if token is not None:
        headers["Authorization"] = f"Bearer {token}"

    interval = DEFAULT_MIN_INTERVAL_SECONDS if min_interval_seconds is None else min_interval_seconds
    resilience = ResilienceConfig(
        name="github",
        base_url=base_url,
        timeout_seconds=15.0,
        # rate-limit handling is a caller policy, see IngestionPipeline
        retry=NO_RETRY,
        min_interval_seconds=interval,
        cache=_cache_config(),
        default_headers=headers,
    )
    return GitHubConfig(resilience=resilience)

"""Catalog backend configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

type CatalogBackend = Literal["api", "sqlite"]

DEFAULT_CATALOG_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class CatalogApiConfig:
    resilience: ResilienceConfig
    page_size: int = DEFAULT_CATALOG_PAGE_SIZE


def get_catalog_api_config() -> CatalogApiConfig:
    values = require_env_vars(("CATALOG_API_BASE_URL",))
    base_url = values["CATALOG_API_BASE_URL"].rstrip("/") + "/"

    resilience = ResilienceConfig(
        name="catalog-api",
        base_url=base_url,
        timeout_seconds=20.0,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        # creates are not idempotent, only reads are retried
        retry=RetryPolicy(total=3, allowed_methods=frozenset({"GET", "HEAD"})),
        cache=None,
        default_headers={"Accept": "application/json"},
    )
    return CatalogApiConfig(resilience=resilience)

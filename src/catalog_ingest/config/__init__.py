"""Application configuration helpers."""

from __future__ import annotations

from .catalog import (
    DEFAULT_CATALOG_PAGE_SIZE,
    CatalogApiConfig,
    CatalogBackend,
    get_catalog_api_config,
)
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError, UnsupportedValueError
from .github import GitHubConfig, get_github_config
from .heuristics import (
    HeuristicTables,
    KeywordRule,
    LocalizationTables,
    default_heuristics,
    default_localization,
    default_queries,
)
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .ingestion import CooldownPolicy, IngestionConfig, ProbeBudget, default_fallback_image
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_CATALOG_PAGE_SIZE",
    "NO_RETRY",
    "CacheConfig",
    "CatalogApiConfig",
    "CatalogBackend",
    "ConfigurationError",
    "CooldownPolicy",
    "DatabaseConfig",
    "GitHubConfig",
    "HeuristicTables",
    "IngestionConfig",
    "KeywordRule",
    "LocalizationTables",
    "MissingConfigurationError",
    "ProbeBudget",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "UnsupportedValueError",
    "configure_logging",
    "default_fallback_image",
    "default_heuristics",
    "default_localization",
    "default_queries",
    "get_catalog_api_config",
    "get_database_config",
    "get_github_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]

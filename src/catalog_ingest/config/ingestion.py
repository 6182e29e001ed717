"""Run configuration for one catalog ingestion."""

from __future__ import annotations

from dataclasses import dataclass, field

from catalog_ingest.domain.model.enums import EntryKind

from .heuristics import (
    HeuristicTables,
    LocalizationTables,
    default_heuristics,
    default_localization,
    default_queries,
)

_PLACEHOLDER_IMAGE = "https://via.placeholder.com/400x300/6366f1/ffffff?text={label}"
FALLBACK_IMAGE_URLS: dict[EntryKind, str] = {
    EntryKind.MCP_SERVER: _PLACEHOLDER_IMAGE.format(label="MCP+Server"),
    EntryKind.AI_AGENT: _PLACEHOLDER_IMAGE.format(label="AI+Agent"),
}
DEFAULT_FALLBACK_IMAGE_URL = FALLBACK_IMAGE_URLS[EntryKind.MCP_SERVER]
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def default_fallback_image(kind: EntryKind = EntryKind.MCP_SERVER) -> str:
    return FALLBACK_IMAGE_URLS[kind]


@dataclass(frozen=True, slots=True)
class CooldownPolicy:
    """How long to back off after the index reports its rate limit as exhausted."""

    cooldown_seconds: float = 60.0
    max_cooldown_seconds: float = 900.0
    max_cooldowns: int = 2

    def wait_for(self, retry_after: float | None) -> float:
        wait = retry_after if retry_after is not None else self.cooldown_seconds
        return max(0.0, min(wait, self.max_cooldown_seconds))


@dataclass(frozen=True, slots=True)
class ProbeBudget:
    per_run: int = 150
    per_candidate: int = 6


@dataclass(frozen=True, slots=True)
class IngestionConfig:
    kind: EntryKind = EntryKind.MCP_SERVER
    queries: tuple[str, ...] = field(default_factory=default_queries)
    min_interval_seconds: float = 0.8
    min_popularity: int = 2
    max_candidates: int = 100
    page_size: int = DEFAULT_PAGE_SIZE
    localization_enabled: bool = True
    fallback_image_url: str = DEFAULT_FALLBACK_IMAGE_URL
    persist_enabled: bool = True
    featured_threshold: int = 50
    probes: ProbeBudget = field(default_factory=ProbeBudget)
    cooldown: CooldownPolicy = field(default_factory=CooldownPolicy)
    heuristics: HeuristicTables = field(default_factory=default_heuristics)
    localization: LocalizationTables = field(default_factory=default_localization)

    def __post_init__(self) -> None:
        if self.min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be non-negative")
        if self.max_candidates < 0:
            raise ValueError("max_candidates must be non-negative")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

    @classmethod
    def for_kind(cls, kind: EntryKind, **overrides: object) -> IngestionConfig:
        """Return a config whose query and keyword tables match ``kind``."""

        defaults: dict[str, object] = {
            "kind": kind,
            "queries": default_queries(kind),
            "heuristics": default_heuristics(kind),
            "localization": default_localization(kind),
            "fallback_image_url": default_fallback_image(kind),
        }
        defaults.update(overrides)
        return cls(**defaults)  # type: ignore[arg-type]

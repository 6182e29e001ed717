"""Catalog ingestion pipeline phases."""

from __future__ import annotations

from .cooldown import RateLimitCooldown
from .deduplication import CatalogIndex, Deduplicator
from .discovery import Discovery, DiscoveryOutcome, candidate_from_record
from .enrichment import Enricher, ProbeCounter
from .localization import Localizer
from .orchestrator import IngestionPipeline
from .persistence import PersistOutcome, Persister
from .scoring import CandidateFilter, Selection, rank, rank_key

__all__ = [
    "CandidateFilter",
    "CatalogIndex",
    "Deduplicator",
    "Discovery",
    "DiscoveryOutcome",
    "Enricher",
    "IngestionPipeline",
    "Localizer",
    "PersistOutcome",
    "Persister",
    "ProbeCounter",
    "RateLimitCooldown",
    "Selection",
    "candidate_from_record",
    "rank",
    "rank_key",
]

"""Domain model for catalog ingestion."""

from __future__ import annotations

from .candidate import Candidate, CatalogEntry, EnrichedFields, ExistingEntry, LocalizedFields
from .enums import (
    DuplicateReason,
    EntryKind,
    FilterDecision,
    ManifestEcosystem,
    PersistStatus,
    RunStatus,
)
from .records import Manifest, RepoDetail, RepoRecord
from .result import IngestionResult

__all__ = [
    "Candidate",
    "CatalogEntry",
    "DuplicateReason",
    "EnrichedFields",
    "EntryKind",
    "ExistingEntry",
    "FilterDecision",
    "IngestionResult",
    "LocalizedFields",
    "Manifest",
    "ManifestEcosystem",
    "PersistStatus",
    "RepoDetail",
    "RepoRecord",
    "RunStatus",
]

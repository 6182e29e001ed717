"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntryKind(StrEnum):
    MCP_SERVER = "mcp_server"
    AI_AGENT = "ai_agent"


class ManifestEcosystem(StrEnum):
    NPM = "npm"
    PYPI = "pypi"


class FilterDecision(StrEnum):
    ACCEPTED = "accepted"
    LOW_POPULARITY = "low_popularity"
    NEGATIVE_KEYWORD = "negative_keyword"
    NO_POSITIVE_KEYWORD = "no_positive_keyword"


class DuplicateReason(StrEnum):
    """Which lookup set matched; ``STORE_CONFLICT`` is the write interface's own check."""

    SOURCE_URL = "source_url"
    SLUG = "slug"
    NAME = "name"
    STORE_CONFLICT = "store_conflict"


class PersistStatus(StrEnum):
    CREATED = "created"
    DUPLICATE = "duplicate"
    FAILED = "failed"
    SKIPPED = "skipped"


class RunStatus(StrEnum):
    COMPLETED = "completed"
    FAILED = "failed"

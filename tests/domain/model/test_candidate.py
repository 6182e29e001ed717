from __future__ import annotations

import pytest

from catalog_ingest.domain.ingest_pipeline import candidate_from_record
from catalog_ingest.domain.model import (
    EnrichedFields,
    EntryKind,
    IngestionResult,
    LocalizedFields,
    RunStatus,
)
from tests.helpers.catalog import make_record


def _enriched(description: str = "Files over MCP") -> EnrichedFields:
    return EnrichedFields(name="files", description=description, slug="files")


def test_to_entry_freezes_candidate_fields() -> None:
    candidate = candidate_from_record(make_record("files", stars=51, topics=("MCP",)))
    candidate.enriched = _enriched()
    candidate.localized = LocalizedFields("pt", "arquivos", "Servidor MCP para arquivos")

    entry = candidate.to_entry(kind=EntryKind.MCP_SERVER, featured_threshold=50)

    assert entry.slug == "files"
    assert entry.stars == 51
    assert entry.is_featured
    assert entry.is_active
    assert candidate.topics == frozenset({"mcp"})


def test_featured_threshold_is_exclusive() -> None:
    candidate = candidate_from_record(make_record("files", stars=50))
    candidate.enriched = _enriched()
    candidate.localized = LocalizedFields("pt", "arquivos", "Servidor MCP para arquivos")

    assert not candidate.to_entry(kind=EntryKind.MCP_SERVER, featured_threshold=50).is_featured


def test_to_entry_requires_description_and_localization() -> None:
    candidate = candidate_from_record(make_record("files"))

    with pytest.raises(ValueError, match="enriched description"):
        candidate.to_entry(kind=EntryKind.MCP_SERVER, featured_threshold=50)

    candidate.enriched = _enriched()
    with pytest.raises(ValueError, match="localized"):
        candidate.to_entry(kind=EntryKind.MCP_SERVER, featured_threshold=50)


def test_localized_fields_must_not_be_blank() -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        LocalizedFields("pt", " ", "descrição")


def test_failed_result_summary() -> None:
    result = IngestionResult(discovered=3, persisted=1)
    result.fail("catalog unreachable")

    summary = result.summary()

    assert result.status is RunStatus.FAILED
    assert not result.succeeded
    assert summary["status"] == "failed"
    assert summary["discovered"] == 3
    assert summary["failure_reason"] == "catalog unreachable"

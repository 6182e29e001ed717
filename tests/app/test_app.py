"""Application wiring: backends and JSON export."""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from catalog_ingest.adapters.export import build_export
from catalog_ingest.app import ingest_catalog
from catalog_ingest.domain.model import EntryKind
from tests.helpers.catalog import FakeCatalog, FakeIndex, make_entry, make_record

if TYPE_CHECKING:
    from pathlib import Path

    from catalog_ingest.adapters.sqlalchemy import SqlAlchemyCatalog
    from catalog_ingest.config import IngestionConfig


def _index() -> FakeIndex:
    record = make_record("files-server", stars=40, description="MCP server for local files")
    return FakeIndex(search_results={"mcp server": [record]}).with_repository(record)


def test_ingest_catalog_exports_accepted_entries(
    ingestion_config: IngestionConfig, tmp_path: Path
) -> None:
    catalog = FakeCatalog()
    export_path = tmp_path / "out" / "entries.json"

    result = ingest_catalog(
        ingestion_config, index=_index(), catalog=catalog, export_path=export_path
    )

    assert result.persisted == 1
    document = json.loads(export_path.read_text(encoding="utf-8"))
    assert document["metadata"]["count"] == 1
    assert document["metadata"]["kind"] == "mcp_server"
    product = document["entries"][0]
    assert product["slug"] == "files-server"
    assert product["github_url"] == "https://github.com/acme/files-server"
    assert product["name_en"] == "files-server"
    assert product["name_pt"] == "arquivos-servidor"


def test_ingest_catalog_with_local_store(
    ingestion_config: IngestionConfig, sqlite_catalog: SqlAlchemyCatalog
) -> None:
    result = ingest_catalog(ingestion_config, backend="sqlite", index=_index())

    assert result.persisted == 1
    page = asyncio.run(sqlite_catalog.list_all(page=1, page_size=10))
    assert [item.slug for item in page.items] == ["files-server"]

    again = ingest_catalog(ingestion_config, backend="sqlite", index=_index())

    assert again.persisted == 0
    assert again.duplicate == 1


def test_export_document_metadata() -> None:
    scraped_at = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)

    document = build_export(
        [make_entry("files"), make_entry("git")], kind=EntryKind.MCP_SERVER, now=scraped_at
    )

    assert document.metadata.count == 2
    assert document.metadata.scraped_at == scraped_at
    assert [entry.slug for entry in document.entries] == ["files", "git"]

"""JSON export of the entries accepted during a run."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from catalog_ingest import __version__
from catalog_ingest.adapters.catalog_api.schema import ProductCreate

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from catalog_ingest.domain.model import CatalogEntry, EntryKind

log = getLogger(__name__)


class ExportMetadata(BaseModel):
    scraped_at: datetime
    count: int
    kind: str
    version: str = __version__


class ExportDocument(BaseModel):
    metadata: ExportMetadata
    entries: list[ProductCreate] = Field(default_factory=list)


def build_export(
    entries: Iterable[CatalogEntry],
    *,
    kind: EntryKind,
    now: datetime | None = None,
) -> ExportDocument:
    """Entries are written in the catalog API's create payload shape."""

    payloads = [ProductCreate.from_entry(entry) for entry in entries]
    return ExportDocument(
        metadata=ExportMetadata(
            scraped_at=now or datetime.now(tz=UTC),
            count=len(payloads),
            kind=str(kind),
        ),
        entries=payloads,
    )


def export_entries(
    entries: Iterable[CatalogEntry],
    path: Path,
    *,
    kind: EntryKind,
    now: datetime | None = None,
) -> Path:
    document = build_export(entries, kind=kind, now=now)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
    log.info("Exported %s entries to %s", document.metadata.count, path)
    return path

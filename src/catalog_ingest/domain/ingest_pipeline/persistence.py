"""Persistence phase: hand accepted entries to the catalog write interface."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from catalog_ingest.domain.errors import DuplicateConflict, PersistError, TransientError
from catalog_ingest.domain.model import PersistStatus

if TYPE_CHECKING:
    from catalog_ingest.domain.model import CatalogEntry
    from catalog_ingest.domain.ports import CatalogWriter

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PersistOutcome:
    status: PersistStatus
    entry_id: str | None = None
    detail: str | None = None


class Persister:
    """Create entries one at a time; a failed create never aborts the run.

    With ``enabled=False`` (dry run) nothing is written and every entry is
    reported as ``skipped``.
    """

    def __init__(self, writer: CatalogWriter | None, *, enabled: bool = True) -> None:
        if enabled and writer is None:
            raise ValueError("A catalog writer is required unless persistence is disabled")
        self._writer = writer
        self._enabled = enabled

    async def persist(self, entry: CatalogEntry) -> PersistOutcome:
        if not self._enabled or self._writer is None:
            log.info("Dry run: would create %s (%s)", entry.name, entry.slug)
            return PersistOutcome(PersistStatus.SKIPPED)
        try:
            entry_id = await self._writer.create(entry)
        except DuplicateConflict as exc:
            log.info("Catalog rejected %s as duplicate: %s", entry.slug, exc)
            return PersistOutcome(PersistStatus.DUPLICATE, detail=str(exc))
        except (PersistError, TransientError) as exc:
            log.warning("Failed to create %s: %s", entry.slug, exc)
            return PersistOutcome(PersistStatus.FAILED, detail=str(exc))
        log.info("Created %s (%s) as %s", entry.name, entry.slug, entry_id)
        return PersistOutcome(PersistStatus.CREATED, entry_id=entry_id)

"""Per-run ingestion summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import RunStatus

if TYPE_CHECKING:
    from .candidate import CatalogEntry


@dataclass(slots=True)
class IngestionResult:
    """Counters for one run; always produced, even when the run fails."""

    discovered: int = 0
    filtered_out: int = 0
    truncated: int = 0
    duplicate: int = 0
    enrich_failed: int = 0
    persisted: int = 0
    persist_failed: int = 0
    queries_failed: int = 0
    cooldowns: int = 0
    unprocessed: int = 0
    status: RunStatus = RunStatus.COMPLETED
    failure_reason: str | None = None
    entries: list[CatalogEntry] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.COMPLETED

    def fail(self, reason: str) -> None:
        self.status = RunStatus.FAILED
        self.failure_reason = reason

    def summary(self) -> dict[str, int | str | None]:
        return {
            "status": str(self.status),
            "discovered": self.discovered,
            "filtered_out": self.filtered_out,
            "truncated": self.truncated,
            "duplicate": self.duplicate,
            "enrich_failed": self.enrich_failed,
            "persisted": self.persisted,
            "persist_failed": self.persist_failed,
            "queries_failed": self.queries_failed,
            "cooldowns": self.cooldowns,
            "unprocessed": self.unprocessed,
            "failure_reason": self.failure_reason,
        }

"""Ports for the existing catalog: paginated reads and idempotent creates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from catalog_ingest.domain.model import CatalogEntry, ExistingEntry


@dataclass(slots=True)
class CatalogPage:
    items: list[ExistingEntry] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1


@runtime_checkable
class CatalogReader(Protocol):
    """Lists existing entries one page at a time (pages start at 1)."""

    async def list_all(self, *, page: int, page_size: int) -> CatalogPage: ...


@runtime_checkable
class CatalogWriter(Protocol):
    """Creates one entry and returns its identifier.

    Raises ``DuplicateConflict`` when the catalog's uniqueness check rejects the
    entry and ``PersistError`` for any other failure.
    """

    async def create(self, entry: CatalogEntry) -> str: ...


@runtime_checkable
class CatalogStore(CatalogReader, CatalogWriter, Protocol):
    """A backend that both lists and creates entries."""

"""Deduplication against the existing catalog and within a single run."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from catalog_ingest.domain.errors import CatalogUnavailableError, IngestionError
from catalog_ingest.domain.model import DuplicateReason

from .text import normalize_name, normalize_slug, normalize_url

if TYPE_CHECKING:
    from collections.abc import Iterable

    from catalog_ingest.domain.model import Candidate, CatalogEntry, ExistingEntry
    from catalog_ingest.domain.ports import CatalogReader

log = getLogger(__name__)

MAX_CATALOG_PAGES = 10_000


@dataclass(slots=True)
class CatalogIndex:
    """Normalised identities of everything known to exist, catalog and batch alike."""

    urls: set[str] = field(default_factory=set)
    slugs: set[str] = field(default_factory=set)
    names: set[str] = field(default_factory=set)

    def __len__(self) -> int:
        return len(self.urls) + len(self.slugs) + len(self.names)

    def add(
        self,
        *,
        source_url: str | None = None,
        slug: str | None = None,
        names: Iterable[str | None] = (),
    ) -> None:
        if source_url:
            self.urls.add(normalize_url(source_url))
        if slug:
            self.slugs.add(normalize_slug(slug))
        for name in names:
            if name and name.strip():
                self.names.add(normalize_name(name))

    def add_existing(self, entry: ExistingEntry) -> None:
        self.add(source_url=entry.source_url, slug=entry.slug, names=(entry.name, *entry.alt_names))

    def match(
        self,
        *,
        source_url: str | None = None,
        slug: str | None = None,
        name: str | None = None,
    ) -> DuplicateReason | None:
        if source_url and normalize_url(source_url) in self.urls:
            return DuplicateReason.SOURCE_URL
        if slug and normalize_slug(slug) in self.slugs:
            return DuplicateReason.SLUG
        if name and name.strip() and normalize_name(name) in self.names:
            return DuplicateReason.NAME
        return None


class Deduplicator:
    """Per-run duplicate detection: load the catalog once, then check and admit.

    ``load`` must complete before any check; an incomplete catalog read raises
    ``CatalogUnavailableError`` so the run aborts instead of risking
    duplicates. Admitted entries join the index immediately, which keeps two
    candidates from the same batch from both being created.
    """

    def __init__(self, reader: CatalogReader, *, page_size: int = 100) -> None:
        self._reader = reader
        self._page_size = page_size
        self._index: CatalogIndex | None = None

    @property
    def index(self) -> CatalogIndex:
        if self._index is None:
            raise RuntimeError("Existing catalog must be loaded before deduplication")
        return self._index

    async def load(self) -> CatalogIndex:
        index = CatalogIndex()
        page = 1
        loaded = 0
        while page <= MAX_CATALOG_PAGES:
            try:
                result = await self._reader.list_all(page=page, page_size=self._page_size)
            except IngestionError as exc:
                raise CatalogUnavailableError(
                    f"Could not read existing catalog page {page}: {exc}"
                ) from exc
            for item in result.items:
                index.add_existing(item)
            loaded += len(result.items)
            if not result.items or page >= result.total_pages:
                break
            page += 1
        else:
            raise CatalogUnavailableError(
                f"Existing catalog exceeds {MAX_CATALOG_PAGES} pages; refusing to continue"
            )

        log.info("Loaded %s existing catalog entries across %s page(s)", loaded, page)
        self._index = index
        return index

    def precheck(self, candidate: Candidate) -> DuplicateReason | None:
        """Cheap check on the source url and raw name before spending enrichment calls."""

        return self.index.match(source_url=candidate.source_url, name=candidate.name)

    def check(self, entry: CatalogEntry) -> DuplicateReason | None:
        index = self.index
        reason = index.match(source_url=entry.source_url, slug=entry.slug, name=entry.name)
        if reason is None:
            reason = index.match(name=entry.localized.name_alt)
        return reason

    def admit(self, entry: CatalogEntry) -> None:
        self.index.add(
            source_url=entry.source_url,
            slug=entry.slug,
            names=(entry.name, entry.localized.name_alt),
        )

    def check_and_admit(self, entry: CatalogEntry) -> DuplicateReason | None:
        reason = self.check(entry)
        if reason is None:
            self.admit(entry)
        else:
            log.info("Skipping duplicate %s (%s)", entry.source_url, reason)
        return reason

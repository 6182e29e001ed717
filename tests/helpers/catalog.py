"""In-memory stand-ins for the repository index and catalog ports."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from catalog_ingest.domain.errors import DuplicateConflict, NotFoundError, TransientError
from catalog_ingest.domain.model import (
    CatalogEntry,
    EnrichedFields,
    EntryKind,
    ExistingEntry,
    LocalizedFields,
    RepoRecord,
)
from catalog_ingest.domain.ports import CatalogPage

if TYPE_CHECKING:
    from catalog_ingest.domain.model import Manifest


def make_record(  # noqa: PLR0913
    name: str,
    *,
    owner: str = "acme",
    stars: int = 10,
    description: str | None = "An MCP server for testing",
    topics: tuple[str, ...] = (),
    updated_at: datetime | None = None,
    source_id: str | None = None,
    homepage: str | None = None,
    language: str | None = "Python",
    license_name: str | None = "MIT",
) -> RepoRecord:
    full_name = f"{owner}/{name}"
    return RepoRecord(
        source_id=source_id or full_name,
        full_name=full_name,
        name=name,
        owner=owner,
        source_url=f"https://github.com/{full_name}",
        stars=stars,
        updated_at=updated_at or datetime(2025, 1, 1, tzinfo=UTC),
        description=description,
        topics=topics,
        homepage=homepage,
        language=language,
        license_name=license_name,
    )


def make_entry(
    name: str,
    *,
    slug: str | None = None,
    source_url: str | None = None,
    name_alt: str | None = None,
    description: str = "An MCP server",
) -> CatalogEntry:
    return CatalogEntry(
        kind=EntryKind.MCP_SERVER,
        source_id=name,
        source_url=source_url or f"https://github.com/acme/{name}",
        enriched=EnrichedFields(
            name=name,
            description=description,
            slug=slug or name.lower(),
            tags=("mcp", "server"),
            categories=("MCP Server",),
        ),
        localized=LocalizedFields(
            language="pt",
            name_alt=name_alt or name,
            description_alt="Servidor MCP para testes",
        ),
        stars=12,
    )


@dataclass(slots=True)
class FakeIndex:
    """Repository index answering from dictionaries and recording every call."""

    search_results: dict[str, list[RepoRecord] | Exception] = field(default_factory=dict)
    details: dict[str, RepoRecord | Exception] = field(default_factory=dict)
    readmes: dict[str, str | Exception] = field(default_factory=dict)
    manifests: dict[str, Manifest] = field(default_factory=dict)
    existing_urls: set[str] = field(default_factory=set)
    raw_root: str = "https://raw.example.test"
    calls: list[tuple[str, str]] = field(default_factory=list)

    async def search(self, query: str, *, page: int = 1, page_size: int = 50) -> list[RepoRecord]:
        del page, page_size
        self.calls.append(("search", query))
        result = self.search_results.get(query, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def get_detail(self, full_name: str) -> RepoRecord:
        self.calls.append(("detail", full_name))
        result = self.details.get(full_name)
        if result is None:
            raise NotFoundError(f"no detail for {full_name}")
        if isinstance(result, Exception):
            raise result
        return result

    async def get_readme(self, full_name: str) -> str | None:
        self.calls.append(("readme", full_name))
        result = self.readmes.get(full_name)
        if isinstance(result, Exception):
            raise result
        return result

    async def get_manifest(self, full_name: str) -> Manifest | None:
        self.calls.append(("manifest", full_name))
        return self.manifests.get(full_name)

    async def probe(self, url: str) -> bool:
        self.calls.append(("probe", url))
        return url in self.existing_urls

    def raw_content_root(self, record: RepoRecord) -> str:
        return f"{self.raw_root}/{record.full_name}/{record.default_branch}/"

    def with_repository(self, record: RepoRecord, *, readme: str | None = None) -> FakeIndex:
        self.details[record.full_name] = record
        if readme is not None:
            self.readmes[record.full_name] = readme
        return self

    def count(self, kind: str) -> int:
        return sum(1 for call_kind, _ in self.calls if call_kind == kind)


@dataclass(slots=True)
class FakeCatalog:
    """Catalog reader and writer enforcing unique slug and source url like the real backends."""

    existing: list[ExistingEntry] = field(default_factory=list)
    created: list[CatalogEntry] = field(default_factory=list)
    fail_on_page: int | None = None
    create_errors: dict[str, Exception] = field(default_factory=dict)
    pages_read: list[int] = field(default_factory=list)

    async def list_all(self, *, page: int, page_size: int) -> CatalogPage:
        self.pages_read.append(page)
        if self.fail_on_page == page:
            raise TransientError("catalog unavailable", status_code=503)
        items = [*self.existing, *(_as_existing(entry) for entry in self.created)]
        total_pages = max(1, math.ceil(len(items) / page_size))
        start = (page - 1) * page_size
        return CatalogPage(
            items=items[start : start + page_size],
            page=page,
            total_pages=total_pages,
        )

    async def create(self, entry: CatalogEntry) -> str:
        error = self.create_errors.get(entry.slug)
        if error is not None:
            raise error
        for existing in [*self.existing, *(_as_existing(item) for item in self.created)]:
            if existing.slug == entry.slug or existing.source_url == entry.source_url:
                raise DuplicateConflict(f"{entry.slug} already exists")
        self.created.append(entry)
        return str(len(self.created))


def _as_existing(entry: CatalogEntry) -> ExistingEntry:
    return ExistingEntry(
        name=entry.name,
        slug=entry.slug,
        source_url=entry.source_url,
        alt_names=(entry.localized.name_alt,),
    )


class FakeClock:
    """Monotonic clock advanced only by the paired ``sleep``."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

"""Candidates under construction and the immutable entries handed to persistence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import EntryKind

if TYPE_CHECKING:
    from datetime import datetime

    from .records import RepoRecord


@dataclass(frozen=True, slots=True)
class EnrichedFields:
    name: str
    description: str
    slug: str
    tags: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    install_command: str = ""
    docs_url: str = ""
    demo_url: str = ""
    license: str = "Unknown"
    creator: str = ""
    version: str = "latest"
    language: str = "Unknown"
    image_url: str = ""
    icon_url: str = ""


@dataclass(frozen=True, slots=True)
class LocalizedFields:
    language: str
    name_alt: str
    description_alt: str

    def __post_init__(self) -> None:
        if not self.name_alt.strip() or not self.description_alt.strip():
            raise ValueError("Localized fields must not be empty")


@dataclass(slots=True)
class Candidate:
    """A discovered, not-yet-persisted catalog entry.

    Filter and ranking read the base attributes; the enricher and localizer fill
    ``enriched`` and ``localized`` in place. ``to_entry`` freezes the result.
    """

    source_id: str
    source_url: str
    name: str
    raw_text: str
    topics: frozenset[str]
    popularity_score: int
    last_updated: datetime
    is_official: bool
    owner: str = ""
    record: RepoRecord | None = None
    enriched: EnrichedFields | None = None
    localized: LocalizedFields | None = None

    def combined_text(self) -> str:
        """Lowercased name, description and topics used by keyword heuristics."""

        return " ".join((self.name, self.raw_text, *sorted(self.topics))).lower()

    def to_entry(self, *, kind: EntryKind, featured_threshold: int) -> CatalogEntry:
        if self.enriched is None or not self.enriched.description:
            raise ValueError(f"Candidate {self.source_id} has no enriched description")
        if self.localized is None:
            raise ValueError(f"Candidate {self.source_id} has not been localized")
        return CatalogEntry(
            kind=kind,
            source_id=self.source_id,
            source_url=self.source_url,
            enriched=self.enriched,
            localized=self.localized,
            stars=self.popularity_score,
            is_official=self.is_official,
            is_featured=self.popularity_score > featured_threshold,
        )


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Immutable, fully derived entry ready for the catalog write interface."""

    kind: EntryKind
    source_id: str
    source_url: str
    enriched: EnrichedFields
    localized: LocalizedFields
    stars: int = 0
    is_official: bool = False
    is_featured: bool = False
    is_active: bool = True

    @property
    def name(self) -> str:
        return self.enriched.name

    @property
    def slug(self) -> str:
        return self.enriched.slug


@dataclass(frozen=True, slots=True)
class ExistingEntry:
    """The identifying fields of an entry already in the catalog."""

    name: str | None = None
    slug: str | None = None
    source_url: str | None = None
    alt_names: tuple[str, ...] = field(default_factory=tuple)

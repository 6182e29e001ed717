"""Records returned by the repository index, translated out of wire payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import ManifestEcosystem


@dataclass(frozen=True, slots=True)
class RepoRecord:
    """A repository as seen by search and detail lookups."""

    source_id: str
    full_name: str
    name: str
    owner: str
    source_url: str
    stars: int
    updated_at: datetime
    description: str | None = None
    topics: tuple[str, ...] = ()
    homepage: str | None = None
    language: str | None = None
    license_name: str | None = None
    default_branch: str = "main"


@dataclass(frozen=True, slots=True)
class Manifest:
    """Package manifest (``package.json`` / ``pyproject.toml``) of a repository."""

    ecosystem: ManifestEcosystem
    name: str | None = None
    version: str | None = None
    license: str | None = None
    author: str | None = None


@dataclass(frozen=True, slots=True)
class RepoDetail:
    """Everything the enricher fetched for one candidate."""

    record: RepoRecord
    readme: str = ""
    manifest: Manifest | None = None
    extra_topics: tuple[str, ...] = field(default_factory=tuple)

"""Enrichment phase: fetch repository detail and derive the catalog fields."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import urljoin

from catalog_ingest.domain.errors import EnrichmentError, RateLimitExceeded, TransientError
from catalog_ingest.domain.model import EnrichedFields, RepoDetail

from .extraction import (
    DEMO_RULES,
    DESCRIPTION_RULES,
    DOCS_RULES,
    IMAGE_RULES,
    INSTALL_RULES,
    compile_label_rules,
    derive_categories,
    derive_tags,
    first_match,
    iter_matches,
    manifest_install_command,
)
from .text import slugify

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from catalog_ingest.config.heuristics import HeuristicTables
    from catalog_ingest.config.ingestion import ProbeBudget
    from catalog_ingest.domain.model import Candidate, Manifest, RepoRecord
    from catalog_ingest.domain.ports import RepositoryIndex

log = getLogger(__name__)


class ProbeCounter:
    """Tracks existence probes against the per-run and per-candidate budgets."""

    def __init__(self, budget: ProbeBudget) -> None:
        self._budget = budget
        self.run_total = 0
        self.candidate_total = 0

    def start_candidate(self) -> None:
        self.candidate_total = 0

    def take(self) -> bool:
        if self.run_total >= self._budget.per_run:
            return False
        if self.candidate_total >= self._budget.per_candidate:
            return False
        self.run_total += 1
        self.candidate_total += 1
        return True


class Enricher:
    """Turn a candidate into ``EnrichedFields``.

    The detail lookup is required; readme and manifest are optional and a
    failure fetching them degrades the extracted fields instead of the
    candidate. ``RateLimitExceeded`` always propagates so the run can cool down.
    """

    def __init__(
        self,
        index: RepositoryIndex,
        *,
        tables: HeuristicTables,
        fallback_image_url: str,
        probe_budget: ProbeBudget,
    ) -> None:
        self._index = index
        self._tables = tables
        self._fallback_image_url = fallback_image_url
        self._probes = ProbeCounter(probe_budget)
        self._tag_rules = compile_label_rules(tables.tag_rules)
        self._category_rules = compile_label_rules(tables.category_rules)

    @property
    def probes_used(self) -> int:
        return self._probes.run_total

    async def enrich(self, candidate: Candidate) -> EnrichedFields:
        detail = await self.fetch_detail(candidate)
        if detail.readme:
            candidate.raw_text = detail.readme
        self._probes.start_candidate()
        return await self.derive(candidate, detail)

    async def fetch_detail(self, candidate: Candidate) -> RepoDetail:
        if candidate.record is None:
            raise EnrichmentError(f"Candidate {candidate.source_id} has no repository record")
        full_name = candidate.record.full_name
        record = await self._index.get_detail(full_name)
        readme = await self._optional(self._index.get_readme, full_name, "readme")
        manifest = await self._optional(self._index.get_manifest, full_name, "manifest")
        return RepoDetail(
            record=record,
            readme=readme or "",
            manifest=manifest,
            extra_topics=tuple(candidate.topics),
        )

    async def derive(self, candidate: Candidate, detail: RepoDetail) -> EnrichedFields:
        record = detail.record
        manifest = detail.manifest
        readme = detail.readme

        name = record.name or candidate.name
        description = (
            (record.description or "").strip()
            or first_match(DESCRIPTION_RULES, readme)
            or f"{self._tables.kind_label} for {name}"
        )
        description = description[:200]
        text = f"{name} {description} {readme}".lower()
        topics = [*record.topics, *detail.extra_topics]

        return EnrichedFields(
            name=name,
            description=description,
            slug=slugify(name) or f"entry-{candidate.source_id}",
            tags=derive_tags(
                text,
                topics=topics,
                rules=self._tag_rules,
                baseline=self._tables.baseline_tags,
                limit=self._tables.max_tags,
            ),
            categories=derive_categories(
                text,
                base=self._tables.base_category,
                rules=self._category_rules,
                limit=self._tables.max_categories,
            ),
            install_command=(
                first_match(INSTALL_RULES, readme) or manifest_install_command(manifest) or ""
            ),
            docs_url=self._docs_url(record, readme),
            demo_url=_resolve_link(record, first_match(DEMO_RULES, readme)) or "",
            license=record.license_name or _manifest_value(manifest, "license") or "Unknown",
            creator=_manifest_value(manifest, "author") or record.owner,
            version=_manifest_value(manifest, "version") or "latest",
            language=record.language or "Unknown",
            image_url=await self._find_image(record, readme),
            icon_url=await self._find_icon(record),
        )

    def _docs_url(self, record: RepoRecord, readme: str) -> str:
        found = _resolve_link(record, first_match(DOCS_RULES, readme))
        if found:
            return found
        if record.homepage:
            return record.homepage
        return f"{record.source_url}#readme"

    async def _find_image(self, record: RepoRecord, readme: str) -> str:
        root = self._index.raw_content_root(record)
        readme_images = (_resolve_asset(root, url) for url in iter_matches(IMAGE_RULES, readme))
        conventional = (urljoin(root, suffix) for suffix in self._tables.image_suffixes)
        found = await self._first_existing(readme_images)
        if found is None:
            found = await self._first_existing(conventional)
        return found or self._fallback_image_url

    async def _find_icon(self, record: RepoRecord) -> str:
        root = self._index.raw_content_root(record)
        found = await self._first_existing(
            urljoin(root, suffix) for suffix in self._tables.icon_suffixes
        )
        return found or ""

    async def _first_existing(self, urls: Iterable[str]) -> str | None:
        seen: set[str] = set()
        for url in urls:
            if url in seen:
                continue
            seen.add(url)
            if not self._probes.take():
                log.debug("Probe budget spent; not checking %s", url)
                return None
            try:
                if await self._index.probe(url):
                    return url
            except TransientError as exc:
                log.debug("Probe for %s failed: %s", url, exc)
        return None

    async def _optional[T](
        self,
        fetch: Callable[[str], Awaitable[T | None]],
        full_name: str,
        what: str,
    ) -> T | None:
        try:
            return await fetch(full_name)
        except RateLimitExceeded:
            raise
        except TransientError as exc:
            log.warning("Could not fetch %s for %s: %s", what, full_name, exc)
            return None


def _manifest_value(manifest: Manifest | None, attribute: str) -> str | None:
    if manifest is None:
        return None
    value = getattr(manifest, attribute)
    return value.strip() if isinstance(value, str) and value.strip() else None


def _resolve_link(record: RepoRecord, link: str | None) -> str | None:
    """Resolve a readme-relative link against the repository's web view."""

    if not link:
        return None
    if link.startswith(("http://", "https://")):
        return link
    if link.startswith("#"):
        return f"{record.source_url}{link}"
    base = f"{record.source_url}/blob/{record.default_branch}/"
    return urljoin(base, link.removeprefix("./"))


def _resolve_asset(root: str, url: str) -> str:
    if url.startswith(("http://", "https://")):
        return url
    return urljoin(root, url.removeprefix("./").lstrip("/"))

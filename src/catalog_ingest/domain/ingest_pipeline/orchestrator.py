"""Run orchestration for one catalog ingestion."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from catalog_ingest.domain.errors import (
    CatalogUnavailableError,
    DiscoveryFailedError,
    IngestionError,
    RateLimitExceeded,
)
from catalog_ingest.domain.model import IngestionResult, PersistStatus

from .cooldown import RateLimitCooldown
from .deduplication import Deduplicator
from .discovery import Discovery
from .enrichment import Enricher
from .localization import Localizer
from .persistence import Persister
from .scoring import CandidateFilter

if TYPE_CHECKING:
    from catalog_ingest.config.ingestion import IngestionConfig
    from catalog_ingest.domain.model import Candidate
    from catalog_ingest.domain.ports import CatalogReader, CatalogWriter, RepositoryIndex

    from .cooldown import Sleeper

log = getLogger(__name__)

DEFAULT_CATALOG_PAGE_SIZE = 100


class IngestionPipeline:
    """Discover, filter, enrich, localize, deduplicate and persist in that order.

    Every per-run component (rate-limit cooldown, probe budget, dedup index) is
    built inside ``run``, so a pipeline can run repeatedly without sharing
    state. ``run`` never raises; failures are reported on the result.
    """

    def __init__(
        self,
        *,
        index: RepositoryIndex,
        reader: CatalogReader,
        writer: CatalogWriter | None,
        config: IngestionConfig,
        catalog_page_size: int = DEFAULT_CATALOG_PAGE_SIZE,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._index = index
        self._reader = reader
        self._writer = writer
        self._config = config
        self._catalog_page_size = catalog_page_size
        self._sleep = sleep

    async def run(self) -> IngestionResult:
        result = IngestionResult()
        try:
            await self._run(result)
        except (CatalogUnavailableError, DiscoveryFailedError) as exc:
            log.error("Ingestion run failed: %s", exc)
            result.fail(str(exc))
        except Exception as exc:  # noqa: BLE001
            log.exception("Ingestion run aborted unexpectedly")
            result.fail(f"Unexpected error: {exc}")
        log.info("Ingestion finished: %s", result.summary())
        return result

    async def _run(self, result: IngestionResult) -> None:
        config = self._config
        cooldown = RateLimitCooldown(config.cooldown, sleep=self._sleep)
        deduplicator = Deduplicator(self._reader, page_size=self._catalog_page_size)
        discovery = Discovery(
            self._index,
            cooldown=cooldown,
            page_size=config.page_size,
            official_owners=config.heuristics.official_owners,
        )
        candidate_filter = CandidateFilter(config.heuristics, min_popularity=config.min_popularity)
        enricher = Enricher(
            self._index,
            tables=config.heuristics,
            fallback_image_url=config.fallback_image_url,
            probe_budget=config.probes,
        )
        localizer = Localizer(config.localization, enabled=config.localization_enabled)
        persister = Persister(self._writer, enabled=config.persist_enabled)

        try:
            await deduplicator.load()

            outcome = await discovery.discover(config.queries)
            result.discovered = len(outcome.candidates)
            result.queries_failed = outcome.queries_failed

            selection = candidate_filter.select(
                outcome.candidates, max_candidates=config.max_candidates
            )
            result.filtered_out = selection.filtered_out
            result.truncated = selection.truncated

            for position, candidate in enumerate(selection.selected):
                if cooldown.exhausted:
                    result.unprocessed = len(selection.selected) - position
                    log.warning(
                        "Rate limit budget spent; leaving %s candidates unprocessed",
                        result.unprocessed,
                    )
                    break
                await self._process(
                    candidate,
                    result=result,
                    cooldown=cooldown,
                    deduplicator=deduplicator,
                    enricher=enricher,
                    localizer=localizer,
                    persister=persister,
                )
        finally:
            result.cooldowns = cooldown.used

    async def _process(  # noqa: PLR0913
        self,
        candidate: Candidate,
        *,
        result: IngestionResult,
        cooldown: RateLimitCooldown,
        deduplicator: Deduplicator,
        enricher: Enricher,
        localizer: Localizer,
        persister: Persister,
    ) -> None:
        if deduplicator.precheck(candidate) is not None:
            log.debug("Already catalogued: %s", candidate.source_url)
            result.duplicate += 1
            return

        try:
            candidate.enriched = await enricher.enrich(candidate)
        except RateLimitExceeded as exc:
            result.enrich_failed += 1
            await cooldown.observe(exc)
            return
        except IngestionError as exc:
            log.warning("Could not enrich %s: %s", candidate.source_url, exc)
            result.enrich_failed += 1
            return

        candidate.localized = localizer.localize(
            candidate.enriched.name, candidate.enriched.description
        )
        entry = candidate.to_entry(
            kind=self._config.kind, featured_threshold=self._config.featured_threshold
        )
        if deduplicator.check_and_admit(entry) is not None:
            result.duplicate += 1
            return

        outcome = await persister.persist(entry)
        match outcome.status:
            case PersistStatus.CREATED:
                result.persisted += 1
                result.entries.append(entry)
            case PersistStatus.SKIPPED:
                result.entries.append(entry)
            case PersistStatus.DUPLICATE:
                result.duplicate += 1
            case PersistStatus.FAILED:
                result.persist_failed += 1

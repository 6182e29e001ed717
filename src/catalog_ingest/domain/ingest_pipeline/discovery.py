"""Discovery phase: run each search query and merge results by source id."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from catalog_ingest.domain.errors import DiscoveryFailedError, RateLimitExceeded, TransientError
from catalog_ingest.domain.model import Candidate

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from catalog_ingest.domain.model import RepoRecord
    from catalog_ingest.domain.ports import RepositoryIndex

    from .cooldown import RateLimitCooldown

log = getLogger(__name__)


@dataclass(slots=True)
class DiscoveryOutcome:
    candidates: list[Candidate] = field(default_factory=list)
    queries_run: int = 0
    queries_failed: int = 0


def candidate_from_record(record: RepoRecord, *, official_owners: Iterable[str] = ()) -> Candidate:
    owners = {owner.lower() for owner in official_owners}
    return Candidate(
        source_id=record.source_id,
        source_url=record.source_url,
        name=record.name,
        raw_text=record.description or "",
        topics=frozenset(topic.lower() for topic in record.topics),
        popularity_score=record.stars,
        last_updated=record.updated_at,
        is_official=record.owner.lower() in owners,
        owner=record.owner,
        record=record,
    )


class Discovery:
    """Issue one search per query and union the results.

    A failing query is counted and skipped. When the index reports its quota
    as exhausted the cooldown is applied and the query retried once; once the
    cooldown budget is spent, remaining queries are counted as failed.
    """

    def __init__(
        self,
        index: RepositoryIndex,
        *,
        cooldown: RateLimitCooldown,
        page_size: int = 50,
        official_owners: Iterable[str] = (),
    ) -> None:
        self._index = index
        self._cooldown = cooldown
        self._page_size = page_size
        self._official_owners = frozenset(official_owners)

    async def discover(self, queries: Sequence[str]) -> DiscoveryOutcome:
        if not queries:
            raise DiscoveryFailedError("No discovery queries configured")

        outcome = DiscoveryOutcome()
        merged: dict[str, Candidate] = {}
        for query in queries:
            outcome.queries_run += 1
            records = await self._search(query)
            if records is None:
                outcome.queries_failed += 1
                continue
            for record in records:
                if record.source_id in merged:
                    continue
                merged[record.source_id] = candidate_from_record(
                    record, official_owners=self._official_owners
                )
            log.info("Query %r returned %s repositories", query, len(records))

        if outcome.queries_failed == outcome.queries_run:
            raise DiscoveryFailedError(f"All {outcome.queries_run} discovery queries failed")

        outcome.candidates = list(merged.values())
        log.info(
            "Discovered %s unique candidates from %s queries (%s failed)",
            len(outcome.candidates),
            outcome.queries_run,
            outcome.queries_failed,
        )
        return outcome

    async def _search(self, query: str) -> list[RepoRecord] | None:
        while not self._cooldown.exhausted:
            try:
                return await self._index.search(query, page=1, page_size=self._page_size)
            except RateLimitExceeded as exc:
                if not await self._cooldown.observe(exc):
                    break
            except TransientError as exc:
                log.warning("Discovery query %r failed: %s", query, exc)
                return None
        log.warning("Skipping discovery query %r: rate limit budget spent", query)
        return None

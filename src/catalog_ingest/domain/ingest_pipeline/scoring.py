"""Relevance filter and deterministic ranking of discovered candidates."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from catalog_ingest.domain.model import FilterDecision

from .text import keyword_pattern

if TYPE_CHECKING:
    import re
    from collections.abc import Iterable

    from catalog_ingest.config.heuristics import HeuristicTables
    from catalog_ingest.domain.model import Candidate

log = getLogger(__name__)


def rank_key(candidate: Candidate) -> tuple[bool, int, float, str]:
    """Official first, then popularity, then recency; source id breaks ties."""

    return (
        not candidate.is_official,
        -candidate.popularity_score,
        -candidate.last_updated.timestamp(),
        candidate.source_id,
    )


def rank(candidates: Iterable[Candidate]) -> list[Candidate]:
    return sorted(candidates, key=rank_key)


@dataclass(slots=True)
class Selection:
    selected: list[Candidate] = field(default_factory=list)
    rejected: Counter[FilterDecision] = field(default_factory=Counter)
    truncated: int = 0

    @property
    def filtered_out(self) -> int:
        return sum(self.rejected.values())


class CandidateFilter:
    """Accept or reject candidates using the configured keyword tables.

    A candidate must reach ``min_popularity`` and mention no negative keyword.
    Past that veto, official candidates and those carrying a strong positive
    marker are accepted outright; the rest need at least one positive keyword.
    Keywords are matched as whole words.
    """

    def __init__(self, tables: HeuristicTables, *, min_popularity: int) -> None:
        self._min_popularity = min_popularity
        self._positive = keyword_pattern(tables.positive_keywords)
        self._negative = keyword_pattern(tables.negative_keywords)
        self._strong = keyword_pattern(tables.strong_positive_markers)

    def evaluate(self, candidate: Candidate) -> FilterDecision:
        if candidate.popularity_score < self._min_popularity:
            return FilterDecision.LOW_POPULARITY
        text = candidate.combined_text()
        if _matches(self._negative, text):
            return FilterDecision.NEGATIVE_KEYWORD
        if candidate.is_official or _matches(self._strong, text):
            return FilterDecision.ACCEPTED
        if not _matches(self._positive, text):
            return FilterDecision.NO_POSITIVE_KEYWORD
        return FilterDecision.ACCEPTED

    def accepts(self, candidate: Candidate) -> bool:
        return self.evaluate(candidate) is FilterDecision.ACCEPTED

    def select(self, candidates: Iterable[Candidate], *, max_candidates: int) -> Selection:
        """Filter, rank and truncate to ``max_candidates``."""

        selection = Selection()
        accepted: list[Candidate] = []
        for candidate in candidates:
            decision = self.evaluate(candidate)
            if decision is FilterDecision.ACCEPTED:
                accepted.append(candidate)
            else:
                selection.rejected[decision] += 1
                log.debug("Rejected %s: %s", candidate.source_url, decision)

        ranked = rank(accepted)
        selection.selected = ranked[:max_candidates]
        selection.truncated = len(ranked) - len(selection.selected)
        log.info(
            "Selected %s candidates (%s filtered out, %s truncated)",
            len(selection.selected),
            selection.filtered_out,
            selection.truncated,
        )
        return selection


def _matches(pattern: re.Pattern[str] | None, text: str) -> bool:
    return pattern is not None and pattern.search(text) is not None

"""Frequency-sum query scoring over a decoded index."""

from __future__ import annotations

import logging

from owl_fts.config import DEFAULT_UNKNOWN_PAGE_ID
from owl_fts.search.index_builder import Index
from owl_fts.search.models import SearchResult


logger = logging.getLogger(__name__)

_TERM_SEPARATOR = " "


def tokenize_query(query: str) -> list[str]:
    """Lowercase ``query`` and split it on single spaces.

    Consecutive spaces produce empty terms; they are kept and simply never
    match an indexed word.
    """
    return query.lower().split(_TERM_SEPARATOR)


class FrequencySearcher:
    """Rank pages by the summed frequencies of the query terms they contain."""

    def __init__(self, index: Index, *, unknown_page_id: str = DEFAULT_UNKNOWN_PAGE_ID) -> None:
        self.index = index
        self.unknown_page_id = unknown_page_id

    def collect_candidates(self, terms: list[str]) -> dict[int, int]:
        """Return every ordinal listed under any term, each with a zero score."""
        postings = self.index.postings
        candidates: dict[int, int] = {}
        for term in terms:
            for ordinal in postings.ordinals_for(term):
                candidates[ordinal] = 0
        return candidates

    def accumulate_scores(self, terms: list[str], candidates: dict[int, int]) -> None:
        """Add each term's frequency to every candidate it has a frequency for.

        A term contributes to candidates nominated by other terms as well,
        and a term repeated in the query contributes once per repetition.
        """
        postings = self.index.postings
        for term in terms:
            frequencies = postings.frequencies_for(term)
            if not frequencies:
                continue
            for ordinal in candidates:
                frequency = frequencies.get(ordinal)
                if frequency is not None:
                    candidates[ordinal] += frequency

    def search(self, query: str, *, limit: int | None = None) -> list[SearchResult]:
        """Return ranked results for ``query``.

        Results are ordered by descending raw score, then ascending page
        ordinal. Scores are normalized so the top result is exactly 1.0.
        """
        if limit is not None and limit <= 0:
            return []

        terms = tokenize_query(query)
        candidates = self.collect_candidates(terms)
        if not candidates:
            return []
        self.accumulate_scores(terms, candidates)

        ranked = sorted(candidates.items(), key=lambda item: (-item[1], item[0]))
        if limit is not None:
            ranked = ranked[:limit]

        max_score = ranked[0][1]
        results = []
        for ordinal, raw_score in ranked:
            # All-zero frequencies tie for the top spot.
            score = raw_score / max_score if max_score else 1.0
            page_id = self.index.page_id(ordinal)
            if page_id is None:
                logger.debug("Page ordinal %d outside page table of %d pages", ordinal, self.index.page_count)
                page_id = self.unknown_page_id
            results.append(SearchResult(page_id=page_id, page_index=ordinal, score=score, raw_score=raw_score))
        return results

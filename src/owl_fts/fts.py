"""Public entry point: decode an encoded index once, search it many times."""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
import logging
from typing import Any

from owl_fts.codec.cluster_fsm import ClusterDecoder
from owl_fts.codec.envelope import open_envelope
from owl_fts.config import Settings
from owl_fts.errors import DecodeError
from owl_fts.observability.logging import configure_logging_from_settings
from owl_fts.observability.metrics import (
    DECODE_COUNT,
    DECODE_LATENCY,
    SEARCH_LATENCY,
    SEARCH_RESULTS,
    init_metrics,
    track_latency,
)
from owl_fts.observability.tracing import create_span, init_tracing
from owl_fts.search.index_builder import Index, build_index
from owl_fts.search.models import SearchResult
from owl_fts.search.searcher import FrequencySearcher


logger = logging.getLogger(__name__)


def configure_observability(settings: Settings | None = None) -> Settings:
    """Apply logging settings and name the tracing and metrics resources.

    Optional: without it the library logs through whatever the host configured
    and creates its tracer lazily under the default service name.
    """
    settings = settings or Settings()
    configure_logging_from_settings(settings)
    init_tracing(settings.service_name)
    init_metrics(settings.service_name)
    return settings


def decode_index(encoded: str) -> Index:
    """Decode base64 ``encoded`` text into an immutable :class:`Index`.

    Raises:
        DecodeError: one of its subclasses, naming the stage that failed.
    """
    envelope = open_envelope(encoded)
    decoder = ClusterDecoder()
    merged = decoder.decode(envelope.body)
    index = build_index(merged, envelope.pages)
    logger.info(
        "Decoded index: %d pages, %d words, %d clusters (%d words replaced)",
        index.page_count,
        index.postings.word_count,
        decoder.clusters_merged,
        decoder.words_replaced,
    )
    return index


class FullTextIndex:
    """A decoded word -> page index that answers free-text queries.

    The index is immutable once constructed, so concurrent searches need no
    locking.
    """

    def __init__(self, encoded: str, *, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        with self._span("owl_fts.decode", {"owl_fts.encoded_length": len(encoded)}):
            with track_latency(DECODE_LATENCY):
                try:
                    index = decode_index(encoded)
                except DecodeError as exc:
                    DECODE_COUNT.labels(outcome=type(exc).__name__).inc()
                    logger.warning("Failed to decode index: %s", exc)
                    raise
        DECODE_COUNT.labels(outcome="ok").inc()
        self._bind(index)

    @classmethod
    def from_index(cls, index: Index, *, settings: Settings | None = None) -> FullTextIndex:
        """Wrap an already decoded :class:`Index`."""
        instance = cls.__new__(cls)
        instance.settings = settings or Settings()
        instance._bind(index)
        return instance

    def _bind(self, index: Index) -> None:
        self.index = index
        self._searcher = FrequencySearcher(index, unknown_page_id=self.settings.unknown_page_id)

    def _span(self, name: str, attributes: dict[str, Any]) -> AbstractContextManager:
        if not self.settings.tracing_enabled:
            return nullcontext()
        return create_span(name, attributes=attributes)

    @property
    def pages(self) -> tuple[str, ...]:
        return self.index.pages

    @property
    def page_count(self) -> int:
        return self.index.page_count

    @property
    def word_count(self) -> int:
        return self.index.postings.word_count

    @property
    def vocabulary(self) -> list[str]:
        """Indexed words in sorted order."""
        return sorted(self.index.postings.page_ordinals)

    def search(self, query: str, *, limit: int | None = None) -> list[SearchResult]:
        """Return pages matching ``query`` ranked by normalized frequency score.

        Never raises for unmatched terms or unknown page ordinals.
        """
        resolved_limit = self.settings.resolve_limit(limit)
        with self._span("owl_fts.search", {"owl_fts.query_length": len(query)}) as span:
            with track_latency(SEARCH_LATENCY):
                results = self._searcher.search(query, limit=resolved_limit)
            if span is not None:
                span.set_attribute("owl_fts.result_count", len(results))
        SEARCH_RESULTS.labels().inc(len(results))
        return results

    def get_stats(self) -> dict[str, Any]:
        """Get index size statistics."""
        postings = self.index.postings
        return {
            "page_count": self.page_count,
            "word_count": self.word_count,
            "posting_count": sum(len(ordinals) for ordinals in postings.page_ordinals.values()),
            "unknown_page_id": self.settings.unknown_page_id,
        }

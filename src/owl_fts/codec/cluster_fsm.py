"""Byte-at-a-time decoder for the cluster stream.

The stream after the page table is a sequence of clusters::

    cluster := word_length(1=L) cluster_length(1=C)
               { word_bytes(L) posting_count(1=P)
                 { page_ordinal(2,be) frequency(2,be) }*P
               }*C

Every word of a cluster shares the single length byte L; it is only read
again when the next cluster starts. Each state has one handler that consumes
a byte and returns the next state, so :meth:`ClusterDecoder.feed` is the whole
transition function.

Completed clusters are merged into a running ``word -> WordPostings`` map.
When a word reappears in a later cluster the later postings replace the
earlier ones wholesale. The replacement is logged at DEBUG level together with
the cluster that first supplied the word.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
import logging

from owl_fts.codec.byte_cursor import ByteCursor
from owl_fts.errors import InvalidEncoding
from owl_fts.search.models import Posting, WordPostings


logger = logging.getLogger(__name__)


class DecodeState(Enum):
    WORD_LENGTH = "word_length"
    CLUSTER_LENGTH = "cluster_length"
    WORD = "word"
    PAGE_COUNT = "page_count"
    POSTING_PAGE = "posting_page"
    POSTING_FREQUENCY = "posting_frequency"


class ClusterDecoder:
    """Rebuilds ``word -> postings`` from the cluster stream."""

    def __init__(self) -> None:
        self.state = DecodeState.WORD_LENGTH
        self.clusters_merged = 0
        self.words_replaced = 0

        self._word_length = 0
        self._cluster_length = 0
        self._posting_count = 0
        self._current_word = ""
        self._pending_ordinal = 0
        self._word_scratch = ByteCursor()
        self._field_scratch = ByteCursor()
        self._postings: list[Posting] = []
        self._batch: dict[str, WordPostings] = {}
        self._merged: dict[str, WordPostings] = {}
        self._origins: dict[str, int] = {}

        self._handlers: dict[DecodeState, Callable[[int], DecodeState]] = {
            DecodeState.WORD_LENGTH: self._on_word_length,
            DecodeState.CLUSTER_LENGTH: self._on_cluster_length,
            DecodeState.WORD: self._on_word_byte,
            DecodeState.PAGE_COUNT: self._on_page_count,
            DecodeState.POSTING_PAGE: self._on_posting_page,
            DecodeState.POSTING_FREQUENCY: self._on_posting_frequency,
        }

    @property
    def at_cluster_boundary(self) -> bool:
        """True when no partially decoded cluster is pending."""
        return self.state is DecodeState.WORD_LENGTH and not self._batch

    def feed(self, byte: int) -> None:
        """Consume one byte and advance the state machine.

        Raises:
            InvalidEncoding: a completed word is not valid UTF-8.
        """
        self.state = self._handlers[self.state](byte)

    def decode(self, cursor: ByteCursor) -> dict[str, WordPostings]:
        """Feed every remaining byte of ``cursor`` and return the merged map."""
        while cursor.remaining():
            self.feed(cursor.next_byte())
        if not self.at_cluster_boundary:
            logger.debug(
                "Discarding incomplete trailing cluster (state=%s, %d words pending)",
                self.state.value,
                len(self._batch),
            )
        return dict(self._merged)

    # State handlers

    def _on_word_length(self, byte: int) -> DecodeState:
        self._word_length = byte
        return DecodeState.CLUSTER_LENGTH

    def _on_cluster_length(self, byte: int) -> DecodeState:
        self._cluster_length = byte
        if self._cluster_length == 0:
            self._merge_batch()
            return DecodeState.WORD_LENGTH
        return self._begin_word()

    def _on_word_byte(self, byte: int) -> DecodeState:
        self._word_scratch.append_byte(byte)
        if len(self._word_scratch) < self._word_length:
            return DecodeState.WORD
        raw = self._word_scratch.to_bytes()
        self._word_scratch.clear()
        try:
            self._current_word = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncoding(f"Indexed word is not valid UTF-8: {raw!r}") from exc
        return DecodeState.PAGE_COUNT

    def _on_page_count(self, byte: int) -> DecodeState:
        self._posting_count = byte
        if self._posting_count == 0:
            return self._finish_word()
        return DecodeState.POSTING_PAGE

    def _on_posting_page(self, byte: int) -> DecodeState:
        self._field_scratch.append_byte(byte)
        if len(self._field_scratch) < 2:
            return DecodeState.POSTING_PAGE
        self._pending_ordinal = self._field_scratch.read_u16()
        self._field_scratch.clear()
        return DecodeState.POSTING_FREQUENCY

    def _on_posting_frequency(self, byte: int) -> DecodeState:
        self._field_scratch.append_byte(byte)
        if len(self._field_scratch) < 2:
            return DecodeState.POSTING_FREQUENCY
        frequency = self._field_scratch.read_u16()
        self._field_scratch.clear()
        self._postings.append(Posting(page_index=self._pending_ordinal, frequency=frequency))
        if len(self._postings) < self._posting_count:
            return DecodeState.POSTING_PAGE
        return self._finish_word()

    # Helpers

    def _begin_word(self) -> DecodeState:
        # A zero-length word has no bytes to wait for.
        if self._word_length == 0:
            self._current_word = ""
            return DecodeState.PAGE_COUNT
        return DecodeState.WORD

    def _finish_word(self) -> DecodeState:
        self._batch[self._current_word] = WordPostings(tuple(self._postings))
        self._postings.clear()
        self._current_word = ""
        if len(self._batch) >= self._cluster_length:
            self._merge_batch()
            return DecodeState.WORD_LENGTH
        return self._begin_word()

    def _merge_batch(self) -> None:
        cluster_number = self.clusters_merged
        for word, postings in self._batch.items():
            if word in self._merged:
                self.words_replaced += 1
                logger.debug(
                    "Word %r from cluster %d replaced by cluster %d",
                    word,
                    self._origins[word],
                    cluster_number,
                )
            self._merged[word] = postings
            self._origins[word] = cluster_number
        self._batch.clear()
        self.clusters_merged += 1


def decode_clusters(cursor: ByteCursor) -> dict[str, WordPostings]:
    """Decode the remaining bytes of ``cursor`` as a cluster stream."""
    return ClusterDecoder().decode(cursor)

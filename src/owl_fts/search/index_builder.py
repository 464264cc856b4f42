"""Assemble the immutable search index from decoded clusters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from owl_fts.search.models import WordPostings


_EMPTY_FREQUENCIES: Mapping[int, int] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class PostingsIndex:
    """Word lookups backing the searcher.

    ``page_ordinals`` keeps each word's ordinals exactly as decoded, repeats
    included. ``frequencies`` maps each word to ``ordinal -> frequency`` where
    a repeated ordinal keeps its last frequency.
    """

    page_ordinals: Mapping[str, tuple[int, ...]] = field(default_factory=lambda: MappingProxyType({}))
    frequencies: Mapping[str, Mapping[int, int]] = field(default_factory=lambda: MappingProxyType({}))

    def ordinals_for(self, word: str) -> tuple[int, ...]:
        return self.page_ordinals.get(word, ())

    def frequencies_for(self, word: str) -> Mapping[int, int]:
        return self.frequencies.get(word, _EMPTY_FREQUENCIES)

    @property
    def word_count(self) -> int:
        return len(self.page_ordinals)


@dataclass(frozen=True, slots=True)
class Index:
    """Decoded postings plus the page table they point into."""

    postings: PostingsIndex
    pages: tuple[str, ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page_id(self, ordinal: int) -> str | None:
        """Return the page identifier for ``ordinal``, or None when out of range."""
        if 0 <= ordinal < len(self.pages):
            return self.pages[ordinal]
        return None


def build_postings_index(merged: Mapping[str, WordPostings]) -> PostingsIndex:
    """Convert decoder output into read-only lookups.

    Ordinals are not checked against the page table here; search resolves
    unknown ordinals to a placeholder instead.
    """
    page_ordinals: dict[str, tuple[int, ...]] = {}
    frequencies: dict[str, Mapping[int, int]] = {}
    for word, word_postings in merged.items():
        page_ordinals[word] = word_postings.ordinals
        by_ordinal: dict[int, int] = {}
        for posting in word_postings.postings:
            by_ordinal[posting.page_index] = posting.frequency
        frequencies[word] = MappingProxyType(by_ordinal)
    return PostingsIndex(
        page_ordinals=MappingProxyType(page_ordinals),
        frequencies=MappingProxyType(frequencies),
    )


def build_index(merged: Mapping[str, WordPostings], pages: Sequence[str]) -> Index:
    return Index(postings=build_postings_index(merged), pages=tuple(pages))

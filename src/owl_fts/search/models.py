"""Search data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Posting:
    """A posting records how often a word occurs on one page."""

    page_index: int
    frequency: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"page_index": self.page_index, "frequency": self.frequency}


@dataclass(frozen=True, slots=True)
class WordPostings:
    """All postings decoded for one word, in wire order.

    Ordinals may repeat; nothing here deduplicates them.
    """

    postings: tuple[Posting, ...] = ()

    @property
    def ordinals(self) -> tuple[int, ...]:
        return tuple(posting.page_index for posting in self.postings)

    @property
    def frequencies(self) -> tuple[int, ...]:
        return tuple(posting.frequency for posting in self.postings)

    def __len__(self) -> int:
        return len(self.postings)


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Represents a page matched by a query, with its normalized score."""

    page_id: str
    page_index: int
    score: float
    raw_score: int = 0

    def __str__(self) -> str:
        return f"SearchResult {{ score: {self.score}, index: {self.page_index}, id: {self.page_id} }}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "page_id": self.page_id,
            "page_index": self.page_index,
            "score": self.score,
            "raw_score": self.raw_score,
        }

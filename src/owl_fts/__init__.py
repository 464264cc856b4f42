"""
Decode compact owl-format postings indexes and search them.

- fts: FullTextIndex facade and decode_index pipeline
- codec: envelope, page table and cluster stream readers
- search: index assembly and frequency-sum scoring
- errors: DecodeError taxonomy
- config: Pydantic settings
- observability: JSON logging, metrics, tracing
"""

from owl_fts.errors import (
    DecodeError,
    DecompressionFailure,
    InvalidEncoding,
    InvalidFormat,
    InvalidInputEncoding,
    UnexpectedEnd,
)
from owl_fts.fts import FullTextIndex, configure_observability, decode_index
from owl_fts.search.index_builder import Index, PostingsIndex
from owl_fts.search.models import Posting, SearchResult


__all__ = [
    "DecodeError",
    "DecompressionFailure",
    "FullTextIndex",
    "Index",
    "InvalidEncoding",
    "InvalidFormat",
    "InvalidInputEncoding",
    "Posting",
    "PostingsIndex",
    "SearchResult",
    "UnexpectedEnd",
    "configure_observability",
    "decode_index",
]

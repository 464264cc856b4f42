"""Test search models functionality."""

from owl_fts.search.models import Posting, SearchResult, WordPostings


class TestPosting:
    """Test Posting model."""

    def test_create_posting_with_defaults(self):
        posting = Posting(page_index=3)

        assert posting.page_index == 3
        assert posting.frequency == 0

    def test_posting_to_dict(self):
        assert Posting(1, 4).to_dict() == {"page_index": 1, "frequency": 4}

    def test_posting_equality(self):
        assert Posting(1, 2) == Posting(1, 2)
        assert Posting(1, 2) != Posting(1, 3)


class TestWordPostings:
    def test_splits_into_parallel_tuples(self):
        word = WordPostings((Posting(0, 2), Posting(5, 1), Posting(0, 7)))

        assert word.ordinals == (0, 5, 0)
        assert word.frequencies == (2, 1, 7)
        assert len(word) == 3

    def test_empty(self):
        assert WordPostings().ordinals == ()


class TestSearchResult:
    def test_str_matches_display_format(self):
        result = SearchResult(page_id="docs/intro", page_index=2, score=0.5, raw_score=3)
        assert str(result) == "SearchResult { score: 0.5, index: 2, id: docs/intro }"

    def test_to_dict(self):
        result = SearchResult(page_id="home", page_index=0, score=1.0, raw_score=9)
        assert result.to_dict() == {"page_id": "home", "page_index": 0, "score": 1.0, "raw_score": 9}

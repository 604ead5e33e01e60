"""
Unit tests for the post-MMR lexical rerank.

Tests verify:
- Query term extraction (lowercase, length >= 3, distinct)
- Bonus is bounded to [0, 0.10] at 0.02 per matched term
- Zero-hit chunks keep their exact score
- Reordering is stable and never changes membership
"""

import pytest

from hybridrank.ranking.lexical import (
    MAX_BONUS,
    lexical_bonus,
    lexical_rerank,
    query_terms,
)
from helpers import chunk

pytestmark = pytest.mark.unit


class TestQueryTerms:
    """Test query term extraction"""

    def test_lowercase_and_whitespace_split(self):
        assert query_terms("Kubernetes  Deployment\tGuide") == ["kubernetes", "deployment", "guide"]

    def test_short_terms_dropped(self):
        assert query_terms("to be or not") == ["not"]

    def test_duplicates_counted_once(self):
        assert query_terms("pod POD Pod service") == ["pod", "service"]

    @pytest.mark.parametrize("query", [None, "", "   ", "a an of"])
    def test_no_usable_terms(self, query):
        assert query_terms(query) == []


class TestLexicalBonus:
    """Test the bounded per-chunk bonus"""

    def test_two_hits(self):
        bonus = lexical_bonus("Grades are posted weekly", ["grades", "weekly"])
        assert bonus == pytest.approx(0.04)

    def test_substring_match(self):
        """Terms match inside longer words"""
        assert lexical_bonus("Containerization basics", ["container"]) == pytest.approx(0.02)

    def test_case_insensitive_content(self):
        assert lexical_bonus("REFUND POLICY", ["refund"]) == pytest.approx(0.02)

    def test_capped_at_max_bonus(self):
        terms = ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf"]
        content = " ".join(terms)
        assert lexical_bonus(content, terms) == pytest.approx(MAX_BONUS)

    @pytest.mark.parametrize("content", [None, ""])
    def test_empty_content(self, content):
        assert lexical_bonus(content, ["refund"]) == 0.0

    def test_no_terms(self):
        assert lexical_bonus("anything at all", []) == 0.0


class TestLexicalRerank:
    """Test reordering of the diversified set"""

    def test_bonus_reorders_close_scores(self):
        chunks = [
            chunk("A", fused=0.50, content="Unrelated introduction"),
            chunk("B", fused=0.48, content="The refund policy covers thirty days"),
        ]

        reranked = lexical_rerank(chunks, "refund policy")

        assert [c.id for c in reranked] == ["B", "A"]
        assert reranked[0].fused_score == pytest.approx(0.52)

    def test_bonus_cannot_overcome_large_gap(self):
        chunks = [
            chunk("A", fused=0.90, content="nothing relevant"),
            chunk("B", fused=0.50, content="refund policy refund policy"),
        ]

        reranked = lexical_rerank(chunks, "refund policy")

        assert [c.id for c in reranked] == ["A", "B"]

    def test_zero_hit_chunks_unchanged(self):
        original = chunk("A", fused=0.37, content="no overlap here")

        reranked = lexical_rerank([original], "kubernetes")

        assert reranked[0] is original
        assert reranked[0].fused_score == 0.37

    def test_query_with_only_short_terms(self):
        chunks = [chunk("A", fused=0.4, content="to be or"), chunk("B", fused=0.6, content="to be")]

        reranked = lexical_rerank(chunks, "to be")

        assert [c.id for c in reranked] == ["B", "A"]
        assert [c.fused_score for c in reranked] == [0.6, 0.4]

    def test_empty_query(self):
        chunks = [chunk("A", fused=0.2), chunk("B", fused=0.7)]
        reranked = lexical_rerank(chunks, "")
        assert [(c.id, c.fused_score) for c in reranked] == [("B", 0.7), ("A", 0.2)]

    def test_empty_content_gets_no_bonus(self):
        reranked = lexical_rerank([chunk("A", fused=0.3, content="")], "refund")
        assert reranked[0].fused_score == 0.3

    def test_stable_for_equal_scores(self):
        chunks = [
            chunk("first", fused=0.5, content="refund"),
            chunk("second", fused=0.5, content="refund"),
            chunk("third", fused=0.5, content="refund"),
        ]

        reranked = lexical_rerank(chunks, "refund")

        assert [c.id for c in reranked] == ["first", "second", "third"]

    def test_membership_preserved(self):
        chunks = [chunk(f"c{i}", fused=0.1 * i, content=f"topic {i} refund") for i in range(5)]

        reranked = lexical_rerank(chunks, "refund topic")

        assert sorted(c.id for c in reranked) == sorted(c.id for c in chunks)

    def test_empty_input(self):
        assert lexical_rerank([], "anything") == []

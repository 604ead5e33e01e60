"""
Lexical rerank: small bounded bonus for literal query-term presence.

Runs after MMR, so it can only reorder the diversified set, never change
its membership.

Bonus:
    hits  = distinct query terms (len >= 3) found as substrings of the content
    bonus = min(0.10, hits × 0.02)
"""

from dataclasses import replace
from typing import List, Optional

from ..models import ScoredChunk

MIN_TERM_LENGTH = 3
BONUS_PER_HIT = 0.02
MAX_BONUS = 0.10


def query_terms(query: Optional[str]) -> List[str]:
    """
    Lowercased, whitespace-split, deduplicated query terms of length >= 3.

    Example:
        >>> query_terms("Kubernetes  pod in a POD")
        ['kubernetes', 'pod']
    """
    if not query:
        return []
    terms: List[str] = []
    for term in query.lower().split():
        if len(term) >= MIN_TERM_LENGTH and term not in terms:
            terms.append(term)
    return terms


def lexical_bonus(content: Optional[str], terms: List[str]) -> float:
    """Bonus in [0, MAX_BONUS] for a chunk given pre-computed query terms"""
    if not content or not terms:
        return 0.0
    text = content.lower()
    hits = sum(1 for term in terms if term in text)
    return min(MAX_BONUS, hits * BONUS_PER_HIT)


def lexical_rerank(chunks: List[ScoredChunk], query: Optional[str]) -> List[ScoredChunk]:
    """
    Add the lexical bonus to fused_score and re-sort (stable, descending).

    Chunks with zero hits keep their exact score. Empty query or content
    yields zero bonus.
    """
    if not chunks:
        return []

    terms = query_terms(query)
    boosted = []
    for chunk in chunks:
        bonus = lexical_bonus(chunk.content, terms)
        boosted.append(replace(chunk, fused_score=chunk.fused_score + bonus) if bonus else chunk)

    return sorted(boosted, key=lambda c: c.fused_score, reverse=True)

"""
Ranking stages for hybrid search.

Components:
- fusion: identity merge + min-max normalized weighted score fusion
- mmr: MMR diversification over a capped candidate window
- lexical: bounded literal query-term bonus, applied last

All stages are pure functions over ScoredChunk lists (except the single
batched embedding lookup in mmr_diversify) and return new values.
"""

from .fusion import normalize, merge_hits, fuse_scores
from .mmr import cosine, candidate_cap, select_mmr, mmr_diversify
from .lexical import query_terms, lexical_bonus, lexical_rerank

__all__ = [
    "normalize",
    "merge_hits",
    "fuse_scores",
    "cosine",
    "candidate_cap",
    "select_mmr",
    "mmr_diversify",
    "query_terms",
    "lexical_bonus",
    "lexical_rerank",
]

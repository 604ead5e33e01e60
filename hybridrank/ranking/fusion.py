"""
Weighted score fusion for combining vector and lexical rankings.

Both candidate lists are merged by chunk id, each score axis is min-max
normalized over the merged set (per query), then blended:

    fused = alpha × norm(vector_score) + (1 - alpha) × norm(bm25_score)

Unlike RRF this keeps score magnitudes: a chunk that wins one axis by a wide
margin stays ahead of one that barely wins. With alpha in [0, 1] the fused
score is bounded to [0, 1].

Degenerate inputs (empty set, all-equal scores, NaN/inf) are handled
numerically and never raise.
"""

import math
from dataclasses import replace
from typing import Dict, List, Tuple

from ..models import LexicalHit, ScoredChunk


def normalize(value: float, lo: float, hi: float) -> float:
    """
    Min-max normalize a single score.

    Args:
        value: Raw score
        lo: Minimum score on this axis (over the merged set)
        hi: Maximum score on this axis

    Returns:
        0.0 for NaN/inf values.
        If the axis is degenerate (hi <= lo): 1.0 when value > 0, else 0.0.
        Otherwise (value - lo) / (hi - lo).

    Example:
        >>> normalize(0.9, 0.0, 0.9)
        1.0
        >>> normalize(3.0, 3.0, 3.0)  # single value on the axis
        1.0
    """
    if math.isnan(value) or math.isinf(value):
        return 0.0
    if hi <= lo:
        return 1.0 if value > 0 else 0.0
    return (value - lo) / (hi - lo)


def merge_hits(
    vector_hits: List[ScoredChunk],
    lexical_hits: List[LexicalHit],
) -> List[ScoredChunk]:
    """
    Merge both candidate lists by chunk id.

    Built in two passes over an explicit id → chunk map:
    1. Vector hits (bm25_score defaults to 0.0)
    2. Lexical hits: fill bm25_score on existing entries,
       add lexical-only chunks with vector_score = 0.0

    Args:
        vector_hits: Results of the vector collaborator
        lexical_hits: Results of the lexical collaborator

    Returns:
        One ScoredChunk per unique id, with both score fields populated
        when the chunk was found by both collaborators.

    Example:
        >>> merged = merge_hits([A(v=0.9)], [A(b=5.0), B(b=3.0)])
        >>> [(c.id, c.vector_score, c.bm25_score) for c in merged]
        [('A', 0.9, 5.0), ('B', 0.0, 3.0)]
    """
    merged: Dict[str, ScoredChunk] = {}

    for chunk in vector_hits:
        merged[chunk.id] = replace(chunk, bm25_score=0.0, fused_score=0.0)

    for hit in lexical_hits:
        existing = merged.get(hit.id)
        if existing is None:
            merged[hit.id] = ScoredChunk(
                id=hit.id,
                scope_id=hit.scope_id,
                content=hit.content,
                metadata=hit.metadata,
                vector_score=0.0,
                bm25_score=hit.bm25_score,
            )
        else:
            merged[hit.id] = replace(existing, bm25_score=hit.bm25_score)

    return list(merged.values())


def _axis_bounds(values: List[float]) -> Tuple[float, float]:
    # Non-finite scores normalize to 0.0 and must not poison the bounds
    finite = [v for v in values if math.isfinite(v)]
    if not finite:
        return 0.0, 0.0
    return min(finite), max(finite)


def fuse_scores(chunks: List[ScoredChunk], alpha: float) -> List[ScoredChunk]:
    """
    Compute fused scores and rank the merged set.

    Args:
        chunks: Identity-merged candidates (see merge_hits)
        alpha: Weight of the vector axis, expected in [0, 1]
            (clamped once in RankingConfig, not here)

    Returns:
        New ScoredChunk list sorted by fused_score (descending).
        Ties keep their input order (stable sort).
    """
    if not chunks:
        return []

    v_min, v_max = _axis_bounds([c.vector_score for c in chunks])
    b_min, b_max = _axis_bounds([c.bm25_score for c in chunks])

    fused = [
        replace(
            chunk,
            fused_score=(
                alpha * normalize(chunk.vector_score, v_min, v_max)
                + (1.0 - alpha) * normalize(chunk.bm25_score, b_min, b_max)
            ),
        )
        for chunk in chunks
    ]

    # sorted() is stable: equal fused scores keep merge order
    return sorted(fused, key=lambda c: c.fused_score, reverse=True)

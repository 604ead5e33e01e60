"""
MMR (Maximal Marginal Relevance) diversification of the fused ranking.

Greedy selection that trades relevance for novelty:

    mmr(c) = λ × fused_score(c) - (1 - λ) × max_sim(c, selected)

where max_sim is the highest cosine similarity between the candidate's
embedding and the embeddings of already selected chunks.

Cost control:
- Only the top `max(4k, 20)` fused candidates (the window) are considered
- Embeddings are fetched lazily, in ONE batched lookup for the window ids
- Chunks without a stored embedding are not eligible for selection

Presentation order is relevance-first: the selected subset is returned
sorted by fused_score, selection order only decides membership.
"""

import logging
from typing import Dict, List, Sequence

import numpy as np

from ..models import ScoredChunk

logger = logging.getLogger(__name__)

MIN_CANDIDATE_WINDOW = 20
WINDOW_MULTIPLIER = 4


def candidate_cap(ranked_size: int, k: int) -> int:
    """Size of the candidate window: min(|ranking|, max(4k, 20))"""
    return min(ranked_size, max(WINDOW_MULTIPLIER * k, MIN_CANDIDATE_WINDOW))


def cosine(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity between two vectors.

    Returns 0.0 when dimensions differ or either vector has zero magnitude.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        return 0.0

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    return float(np.dot(va, vb) / (norm_a * norm_b))


def select_mmr(
    candidates: List[ScoredChunk],
    embeddings: Dict[str, np.ndarray],
    k: int,
    lambda_: float,
) -> List[ScoredChunk]:
    """
    Greedy MMR selection over an already capped, fused-descending window.

    Args:
        candidates: Candidate window, sorted by fused_score (descending)
        embeddings: id → embedding for (a subset of) the candidates
        k: Target number of selected chunks
        lambda_: Relevance weight in [0, 1] (1.0 = pure relevance)

    Returns:
        Up to min(k, candidates with embeddings) chunks,
        sorted by fused_score (descending, stable)
    """
    # Eligibility: in the window AND has an embedding
    eligible = [c for c in candidates if c.id in embeddings]
    if not eligible or k < 1:
        return []

    target = min(k, len(eligible))

    # Seed with the best fused candidate that has an embedding
    selected: List[ScoredChunk] = [eligible[0]]
    remaining = eligible[1:]

    # max_sim[id] = highest cosine to any selected chunk so far (floored at 0.0)
    max_sim: Dict[str, float] = {c.id: 0.0 for c in remaining}

    while len(selected) < target and remaining:
        last = embeddings[selected[-1].id]
        for c in remaining:
            max_sim[c.id] = max(max_sim[c.id], cosine(embeddings[c.id], last))

        best_idx = -1
        best_score = float("-inf")
        for idx, c in enumerate(remaining):
            score = lambda_ * c.fused_score - (1.0 - lambda_) * max_sim[c.id]
            # Strict '>' keeps the first encountered (higher fused) on ties
            if score > best_score:
                best_score = score
                best_idx = idx

        if best_idx < 0:
            break
        selected.append(remaining.pop(best_idx))

    return sorted(selected, key=lambda c: c.fused_score, reverse=True)


async def mmr_diversify(
    ranked: List[ScoredChunk],
    k: int,
    lambda_: float,
    embedding_lookup,
) -> List[ScoredChunk]:
    """
    Diversify the top of a fused ranking.

    Args:
        ranked: Fused ranking (descending fused_score)
        k: Target diversified size (>= 1)
        lambda_: Relevance/diversity trade-off in [0, 1]
        embedding_lookup: Collaborator with
            ``async fetch_embeddings(ids) -> Dict[str, np.ndarray]``

    Returns:
        min(k, windowed candidates with embeddings) chunks,
        relevance-first. Empty when no windowed candidate has an embedding.

    Raises:
        RetrievalError: If the embedding lookup itself fails
    """
    if not ranked:
        return []

    window = ranked[:candidate_cap(len(ranked), k)]
    embeddings = await embedding_lookup.fetch_embeddings([c.id for c in window])

    missing = sum(1 for c in window if c.id not in embeddings)
    if missing:
        logger.debug(f"MMR: {missing}/{len(window)} candidates have no embedding and are skipped")

    selected = select_mmr(window, embeddings, k, lambda_)
    logger.debug(f"MMR selected {len(selected)} of {len(window)} windowed candidates (k={k}, lambda={lambda_})")
    return selected

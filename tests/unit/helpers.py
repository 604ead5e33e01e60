"""Test data builders and mocked collaborators shared by unit tests"""

from typing import Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import numpy as np

from hybridrank.models import LexicalHit, ScoredChunk
from hybridrank.retrievers.base import BaseEmbeddingLookup, BaseLexicalSearch, BaseVectorSearch


def chunk(
    chunk_id: str,
    fused: float = 0.0,
    content: Optional[str] = None,
    vector: float = 0.0,
    bm25: float = 0.0,
    scope_id: str = "file-1",
) -> ScoredChunk:
    """Shorthand ScoredChunk constructor for tests"""
    return ScoredChunk(
        id=chunk_id,
        scope_id=scope_id,
        content=content if content is not None else f"content of {chunk_id}",
        metadata={"chunk_index": chunk_id},
        vector_score=vector,
        bm25_score=bm25,
        fused_score=fused,
    )


def lexical_hit(chunk_id: str, bm25: float, content: Optional[str] = None, scope_id: str = "file-1") -> LexicalHit:
    return LexicalHit(
        id=chunk_id,
        scope_id=scope_id,
        content=content if content is not None else f"content of {chunk_id}",
        metadata={"chunk_index": chunk_id},
        bm25_score=bm25,
    )


def embedding_lookup_mock(embeddings: Dict[str, List[float]]) -> Mock:
    """
    Embedding lookup returning the subset of `embeddings` that was requested.

    Records calls on .fetch_embeddings (AsyncMock).
    """
    store = embedding_map(embeddings)

    lookup = Mock(spec=BaseEmbeddingLookup)
    lookup.fetch_embeddings = AsyncMock(
        side_effect=lambda ids: {i: store[i] for i in ids if i in store}
    )
    return lookup


def vector_search_mock(hits: Optional[List[ScoredChunk]] = None, error: Optional[Exception] = None) -> Mock:
    search = Mock(spec=BaseVectorSearch)
    search.vector_search = AsyncMock(return_value=hits or [], side_effect=error)
    return search


def lexical_search_mock(hits: Optional[List[LexicalHit]] = None, error: Optional[Exception] = None) -> Mock:
    search = Mock(spec=BaseLexicalSearch)
    search.lexical_search = AsyncMock(return_value=hits or [], side_effect=error)
    return search


def embedding_map(vectors: Dict[str, List[float]]) -> Dict[str, np.ndarray]:
    return {key: np.asarray(value, dtype=np.float64) for key, value in vectors.items()}

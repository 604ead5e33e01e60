"""
Abstract base classes for the retrieval collaborators.

The ranking core only talks to these interfaces, so storage backends can be
swapped (or faked in tests) without touching fusion/MMR/rerank.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

import numpy as np

from ..exceptions import RetrievalError  # noqa: F401
from ..models import LexicalHit, ScoredChunk


class BaseVectorSearch(ABC):
    """Dense-embedding similarity search scoped to one document"""

    @abstractmethod
    async def vector_search(
        self,
        scope_id: str,
        query_text: str,
        top_k: int
    ) -> List[ScoredChunk]:
        """
        Find chunks of `scope_id` most similar to `query_text`.

        Returns:
            Up to top_k ScoredChunk with vector_score set
            (ideally a similarity in [0, 1]; any real value is tolerated)
        """
        pass


class BaseLexicalSearch(ABC):
    """Full-text (BM25-style) search scoped to one document"""

    @abstractmethod
    async def lexical_search(
        self,
        scope_id: str,
        query_text: str,
        top_k: int
    ) -> List[LexicalHit]:
        """
        Returns:
            Up to top_k LexicalHit with non-negative, unbounded bm25_score
        """
        pass


class BaseEmbeddingLookup(ABC):
    """Batched lookup of stored chunk embeddings"""

    @abstractmethod
    async def fetch_embeddings(self, ids: Sequence[str]) -> Dict[str, np.ndarray]:
        """
        Fetch embeddings for the given chunk ids in ONE call.

        Returns:
            Partial mapping id → vector. Unknown ids and malformed records
            are omitted, never an error.

        Raises:
            RetrievalError: Only when the lookup mechanism itself fails
        """
        pass


class BaseQueryEmbedder(ABC):
    """Turns query text into a query embedding (used by vector search)"""

    @abstractmethod
    async def embed_query(self, text: str) -> List[float]:
        pass

    def close(self):
        """Optional cleanup (close API clients, etc.)"""
        pass

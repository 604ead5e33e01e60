"""
Hybrid search service: fan-out → fusion → MMR → lexical rerank

One call to hybrid_search() runs a full ranking pass for a single document
scope. Nothing is cached or persisted between calls; the thread pool and the
collaborators' connection pool are the only shared resources.
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from .config import RankingConfig, default_worker_threads
from .models import LexicalHit, ScoredChunk
from .ranking import fuse_scores, lexical_rerank, merge_hits, mmr_diversify
from .retrievers.base import (
    BaseEmbeddingLookup,
    BaseLexicalSearch,
    BaseVectorSearch,
    RetrievalError,
)

logger = logging.getLogger(__name__)


def create_executor(worker_threads: Optional[int] = None) -> ThreadPoolExecutor:
    """
    Bounded pool for blocking collaborator work

    Sized max(4, available CPUs), or larger if configured.
    """
    threads = max(worker_threads or 0, default_worker_threads())
    logger.info(f"event=hybrid_executor_config threads={threads}")
    return ThreadPoolExecutor(max_workers=threads, thread_name_prefix="hybrid-search")


class HybridSearchService:
    """
    Hybrid (vector + lexical) retrieval with MMR diversification.

    The RankingConfig is fixed for the lifetime of the service; per-request
    state lives only inside hybrid_search().
    """

    def __init__(
        self,
        vector_search: BaseVectorSearch,
        lexical_search: BaseLexicalSearch,
        embedding_lookup: BaseEmbeddingLookup,
        config: RankingConfig,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Args:
            vector_search: Dense similarity collaborator
            lexical_search: Full-text collaborator
            embedding_lookup: Batched embedding fetch for MMR
            config: Clamped ranking knobs (top_k, alpha, mmr_k, mmr_lambda)
            timeout_seconds: Upper bound for the fan-out (None = wait forever)
        """
        self.vector_search = vector_search
        self.lexical_search = lexical_search
        self.embedding_lookup = embedding_lookup
        self.config = config
        self.timeout_seconds = timeout_seconds

    async def search(self, scope_id: str, query: str) -> Tuple[List[ScoredChunk], List[LexicalHit]]:
        """
        Run vector and lexical search concurrently and wait for both.

        Args:
            scope_id: Document to search in (required)
            query: Query text, passed through unchanged (may be empty)

        Returns:
            (vector_hits, lexical_hits), each up to config.top_k items

        Raises:
            ValueError: If scope_id is empty
            RetrievalError: If either collaborator fails or the fan-out times out
        """
        if not scope_id:
            raise ValueError("scope_id is required")

        top_k = self.config.top_k
        tasks = [
            asyncio.ensure_future(self.vector_search.vector_search(scope_id, query, top_k)),
            asyncio.ensure_future(self.lexical_search.lexical_search(scope_id, query, top_k)),
        ]
        fan_out = asyncio.gather(*tasks)

        try:
            if self.timeout_seconds is None:
                vector_hits, lexical_hits = await fan_out
            else:
                vector_hits, lexical_hits = await asyncio.wait_for(fan_out, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(f"Hybrid fan-out timed out after {self.timeout_seconds}s (scope={scope_id})")
            raise RetrievalError(f"Retrieval fan-out timeout ({self.timeout_seconds}s)") from e
        finally:
            # A failed call must not leave its sibling holding a pool connection
            for task in tasks:
                if not task.done():
                    task.cancel()

        return list(vector_hits), list(lexical_hits)

    async def hybrid_search(self, scope_id: str, query: str) -> List[ScoredChunk]:
        """
        Full ranking pass for one query.

        Returns:
            Diversified chunks, relevance-first (fused score incl. lexical bonus)

        Raises:
            ValueError: If scope_id is empty
            RetrievalError: If any collaborator fails (no partial results)
        """
        t0 = time.perf_counter()

        vector_hits, lexical_hits = await self.search(scope_id, query)

        fused = fuse_scores(merge_hits(vector_hits, lexical_hits), self.config.alpha)
        diversified = await mmr_diversify(
            fused,
            self.config.mmr_k,
            self.config.mmr_lambda,
            self.embedding_lookup,
        )
        reranked = lexical_rerank(diversified, query)

        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        logger.info(
            f"event=hybrid_search_done scope={scope_id} topK={self.config.top_k} alpha={self.config.alpha} "
            f"vecN={len(vector_hits)} bm25N={len(lexical_hits)} mergedN={len(fused)} "
            f"outN={len(reranked)} ms={elapsed_ms}"
        )
        return reranked

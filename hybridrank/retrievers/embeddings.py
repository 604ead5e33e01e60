"""
Query embedding via the Google Gen AI SDK (Vertex AI).

The SDK call is blocking, so it runs on the shared bounded thread pool
instead of the event loop. Only query text is embedded here; chunk
embeddings are produced by the ingestion pipeline.
"""

import asyncio
import logging
from concurrent.futures import Executor
from typing import List, Optional

from google import genai

from .base import BaseQueryEmbedder, RetrievalError

logger = logging.getLogger(__name__)


class GenAIQueryEmbedder(BaseQueryEmbedder):
    """Embed queries with a Gen AI embedding model (default: text-embedding-005)"""

    def __init__(
        self,
        genai_client: genai.Client,
        model: str = "text-embedding-005",
        executor: Optional[Executor] = None,
    ):
        """
        Args:
            genai_client: Initialized Google Gen AI client
            model: Embedding model name (must match the ingestion model)
            executor: Bounded pool for the blocking SDK call
                (None = asyncio default executor)
        """
        self.genai_client = genai_client
        self.model = model
        self.executor = executor

    def _embed_sync(self, text: str) -> List[float]:
        response = self.genai_client.models.embed_content(
            model=self.model,
            contents=text,
        )
        return list(response.embeddings[0].values)

    async def embed_query(self, text: str) -> List[float]:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, self._embed_sync, text)
        except Exception as e:
            logger.error(f"Query embedding failed (model={self.model}): {e}")
            raise RetrievalError(f"Failed to embed query: {e}") from e

    def close(self):
        self.genai_client = None

"""
PostgreSQL + pgvector collaborators

- PgVectorSearch: cosine similarity search scoped to one document
- PgEmbeddingLookup: batched embedding fetch for the MMR window

Both read the chunk table written by ingestion (see database.py).
"""

import logging
import uuid
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..database import ChunkDatabase, validate_identifier
from ..models import ScoredChunk
from ..utils import clamp01, decode_metadata, parse_vector_text
from .base import BaseEmbeddingLookup, BaseQueryEmbedder, BaseVectorSearch, RetrievalError

logger = logging.getLogger(__name__)


class PgVectorSearch(BaseVectorSearch):
    """Vector similarity search over the chunk table"""

    def __init__(
        self,
        database: ChunkDatabase,
        embedder: BaseQueryEmbedder,
        table: str = "rag_chunks",
        scope_key: str = "fileId",
    ):
        """
        Args:
            database: Connected ChunkDatabase
            embedder: Produces the query embedding
            table: Chunk table name (plain identifier)
            scope_key: Metadata key holding the document id
        """
        self.database = database
        self.embedder = embedder
        self.table = validate_identifier(table)
        self.scope_key = scope_key

    async def vector_search(self, scope_id: str, query_text: str, top_k: int) -> List[ScoredChunk]:
        """
        Cosine similarity search within one document

        Similarity = 1 - cosine distance, clamped to [0, 1].
        """
        query_embedding = await self.embedder.embed_query(query_text)

        sql = f"""
            SELECT
                id,
                content,
                metadata,
                1 - (embedding <=> $1::vector) AS similarity
            FROM {self.table}
            WHERE metadata->>($2::text) = $3
            ORDER BY embedding <=> $1::vector
            LIMIT $4
        """

        try:
            async with self.database.require_pool().acquire() as conn:
                rows = await conn.fetch(sql, query_embedding, self.scope_key, scope_id, top_k)
        except Exception as e:
            logger.error(f"pgvector search failed for scope={scope_id}: {e}")
            raise RetrievalError(f"Vector search failed: {e}") from e

        chunks = [
            ScoredChunk(
                id=str(row["id"]),
                scope_id=scope_id,
                content=row["content"] or "",
                metadata=decode_metadata(row["metadata"]),
                vector_score=clamp01(row["similarity"]),
            )
            for row in rows
        ]

        logger.info(f"event=pgvector_search scope={scope_id} topK={top_k} returned={len(chunks)}")
        return chunks


class PgEmbeddingLookup(BaseEmbeddingLookup):
    """Fetch stored chunk embeddings by id (one query per call)"""

    def __init__(self, database: ChunkDatabase, table: str = "rag_chunks"):
        self.database = database
        self.table = validate_identifier(table)

    @staticmethod
    def _to_uuid(chunk_id: str) -> Optional[uuid.UUID]:
        try:
            return uuid.UUID(str(chunk_id))
        except ValueError:
            return None

    async def fetch_embeddings(self, ids: Sequence[str]) -> Dict[str, np.ndarray]:
        """
        Fetch embeddings for `ids`

        Ids that are not UUIDs cannot exist in the table and are skipped.
        Rows whose vector text can't be parsed are dropped with a warning.
        """
        # Canonical UUID text → id as the caller spelled it
        requested: Dict[str, str] = {}
        for chunk_id in ids:
            parsed = self._to_uuid(chunk_id)
            if parsed is not None:
                requested[str(parsed)] = chunk_id
        if not requested:
            return {}
        uuids = [uuid.UUID(key) for key in requested]

        # Text form keeps parsing under our control (malformed rows are dropped, not fatal)
        sql = f"SELECT id, embedding::text AS embedding_text FROM {self.table} WHERE id = ANY($1::uuid[])"

        try:
            async with self.database.require_pool().acquire() as conn:
                rows = await conn.fetch(sql, uuids)
        except Exception as e:
            logger.error(f"Embedding lookup failed for {len(uuids)} ids: {e}")
            raise RetrievalError(f"Failed to fetch embeddings for MMR: {e}") from e

        embeddings: Dict[str, np.ndarray] = {}
        for row in rows:
            row_key = str(row["id"])
            chunk_id = requested.get(row_key, row_key)
            try:
                vector = parse_vector_text(row["embedding_text"])
            except ValueError as e:
                logger.warning(f"Dropping malformed embedding for chunk {chunk_id}: {e}")
                continue
            if vector is None:
                logger.warning(f"Dropping empty embedding for chunk {chunk_id}")
                continue
            embeddings[chunk_id] = vector

        logger.debug(f"Fetched {len(embeddings)}/{len(uuids)} embeddings")
        return embeddings

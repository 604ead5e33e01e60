"""
PostgreSQL full-text search collaborator (lexical side of hybrid search).

Ranks chunks of one document with ts_rank_cd over to_tsvector(content),
matched by websearch_to_tsquery (quoted phrases, OR, -exclusion supported).
Scores are non-negative and unbounded; fusion normalizes them per query.

An empty or stopword-only query matches nothing and returns [].
"""

import logging
from typing import List

from ..database import ChunkDatabase, validate_identifier
from ..models import LexicalHit
from ..utils import decode_metadata
from .base import BaseLexicalSearch, RetrievalError

logger = logging.getLogger(__name__)


class PostgresFullTextSearch(BaseLexicalSearch):
    """Lexical search over the chunk table using PostgreSQL text search"""

    def __init__(
        self,
        database: ChunkDatabase,
        table: str = "rag_chunks",
        scope_key: str = "fileId",
        language: str = "english",
    ):
        """
        Args:
            database: Connected ChunkDatabase
            table: Chunk table name (plain identifier)
            scope_key: Metadata key holding the document id
            language: Text search configuration (regconfig), e.g. 'english', 'simple'
        """
        self.database = database
        self.table = validate_identifier(table)
        self.scope_key = scope_key
        self.language = language

    async def lexical_search(self, scope_id: str, query_text: str, top_k: int) -> List[LexicalHit]:
        sql = f"""
            SELECT
                id,
                content,
                metadata,
                ts_rank_cd(to_tsvector($1::regconfig, content), q) AS rank
            FROM {self.table}, websearch_to_tsquery($1::regconfig, $2) AS q
            WHERE metadata->>($3::text) = $4
              AND to_tsvector($1::regconfig, content) @@ q
            ORDER BY rank DESC
            LIMIT $5
        """

        try:
            async with self.database.require_pool().acquire() as conn:
                rows = await conn.fetch(
                    sql, self.language, query_text or "", self.scope_key, scope_id, top_k
                )
        except Exception as e:
            logger.error(f"Full-text search failed for scope={scope_id}: {e}")
            raise RetrievalError(f"Lexical search failed: {e}") from e

        hits = [
            LexicalHit(
                id=str(row["id"]),
                scope_id=scope_id,
                content=row["content"] or "",
                metadata=decode_metadata(row["metadata"]),
                bm25_score=float(row["rank"] or 0.0),
            )
            for row in rows
        ]

        logger.info(f"event=fts_search scope={scope_id} topK={top_k} returned={len(hits)}")
        return hits

"""
Factory to create the retrieval collaborators from Settings.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Optional

from google import genai

from ..config import Settings
from ..database import ChunkDatabase
from .base import BaseEmbeddingLookup, BaseLexicalSearch, BaseQueryEmbedder, BaseVectorSearch
from .embeddings import GenAIQueryEmbedder
from .fulltext import PostgresFullTextSearch
from .pgvector import PgEmbeddingLookup, PgVectorSearch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Retrievers:
    """The three collaborators a HybridSearchService needs"""
    vector_search: BaseVectorSearch
    lexical_search: BaseLexicalSearch
    embedding_lookup: BaseEmbeddingLookup


class RetrieverFactory:
    """Build PostgreSQL/pgvector + Gen AI backed collaborators"""

    @classmethod
    def create_query_embedder(
        cls,
        settings: Settings,
        executor: Optional[Executor] = None,
        genai_client: Optional[genai.Client] = None,
    ) -> BaseQueryEmbedder:
        """
        Create the Gen AI query embedder

        Raises:
            ValueError: If no client is given and GCP_PROJECT_ID is not configured
        """
        if genai_client is None:
            if not settings.gcp_project_id:
                raise ValueError("GCP_PROJECT_ID (or GOOGLE_CLOUD_PROJECT) environment variable is required")
            logger.info(
                f"Initializing Google Gen AI (project={settings.gcp_project_id}, location={settings.gcp_location})..."
            )
            genai_client = genai.Client(
                vertexai=True,
                project=settings.gcp_project_id,
                location=settings.gcp_location,
            )
        return GenAIQueryEmbedder(genai_client, model=settings.embedding_model, executor=executor)

    @classmethod
    def create(
        cls,
        settings: Settings,
        database: ChunkDatabase,
        executor: Optional[Executor] = None,
        query_embedder: Optional[BaseQueryEmbedder] = None,
    ) -> Retrievers:
        """
        Create all collaborators sharing one database pool.

        Args:
            settings: Process settings
            database: ChunkDatabase (connected before the first search)
            executor: Bounded pool for blocking SDK calls
            query_embedder: Override the Gen AI embedder (tests, other providers)
        """
        if query_embedder is None:
            query_embedder = cls.create_query_embedder(settings, executor=executor)

        retrievers = Retrievers(
            vector_search=PgVectorSearch(
                database,
                query_embedder,
                table=settings.chunk_table,
                scope_key=settings.scope_metadata_key,
            ),
            lexical_search=PostgresFullTextSearch(
                database,
                table=settings.chunk_table,
                scope_key=settings.scope_metadata_key,
                language=settings.fts_language,
            ),
            embedding_lookup=PgEmbeddingLookup(database, table=settings.chunk_table),
        )
        logger.info(
            f"Retrievers created: table={settings.chunk_table} scope_key={settings.scope_metadata_key} "
            f"fts_language={settings.fts_language} embedding_model={settings.embedding_model}"
        )
        return retrievers

"""
Retrieval collaborators for hybrid search.

Usage:
    from hybridrank.retrievers import RetrieverFactory

    retrievers = RetrieverFactory.create(settings, database, executor=executor)
    hits = await retrievers.vector_search.vector_search(scope_id, "query", top_k=20)

Or implement the base classes for another backend:
    from hybridrank.retrievers import BaseVectorSearch, BaseLexicalSearch, BaseEmbeddingLookup
"""

from .base import (
    RetrievalError,
    BaseVectorSearch,
    BaseLexicalSearch,
    BaseEmbeddingLookup,
    BaseQueryEmbedder,
)
from .embeddings import GenAIQueryEmbedder
from .pgvector import PgVectorSearch, PgEmbeddingLookup
from .fulltext import PostgresFullTextSearch
from .factory import RetrieverFactory, Retrievers

__all__ = [
    'RetrievalError',
    'BaseVectorSearch',
    'BaseLexicalSearch',
    'BaseEmbeddingLookup',
    'BaseQueryEmbedder',
    'GenAIQueryEmbedder',
    'PgVectorSearch',
    'PgEmbeddingLookup',
    'PostgresFullTextSearch',
    'RetrieverFactory',
    'Retrievers',
]

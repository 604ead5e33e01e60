"""
Database module for PostgreSQL + pgvector

Owns the asyncpg connection pool shared by the vector search, full-text
search and embedding lookup collaborators. The chunk table is written by
the ingestion pipeline; this module only reads it.

Expected chunk table layout:
    id         UUID PRIMARY KEY
    content    TEXT
    metadata   JSONB      -- contains the scope key (e.g. "fileId")
    embedding  VECTOR(n)
"""

import asyncio
import logging
import re
from typing import Optional

import asyncpg
from pgvector.asyncpg import register_vector

from .exceptions import RetrievalError

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def validate_identifier(name: str) -> str:
    """
    Validate a (optionally schema-qualified) SQL identifier

    Table names are interpolated into SQL text, so only plain identifiers
    are accepted.

    Raises:
        ValueError: If name is not a plain identifier
    """
    if not name or not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


class ChunkDatabase:
    """PostgreSQL + pgvector connection pool"""

    def __init__(self, database_url: str, min_size: int = 1, max_size: int = 10):
        self.pool: Optional[asyncpg.Pool] = None
        # asyncpg doesn't understand 'postgresql+asyncpg://', only 'postgresql://'
        self.connection_string = database_url.replace("postgresql+asyncpg://", "postgresql://")
        self.min_size = min_size
        self.max_size = max_size

    async def connect(self):
        """
        Initialize connection pool

        Raises:
            RetrievalError: If the database is unreachable or rejects the connection
        """
        async def init_connection(conn):
            """Register vector type for each new connection in the pool"""
            await register_vector(conn)

        host = self.connection_string.split("@")[-1]
        try:
            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.min_size,
                max_size=self.max_size,
                init=init_connection,
            )
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error(f"Failed to connect to PostgreSQL at {host}: {e}")
            raise RetrievalError(f"Database connection failed: {e}") from e
        logger.info(f"Connected to PostgreSQL: {host}")

    async def disconnect(self):
        """Close connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Disconnected from PostgreSQL")

    def require_pool(self) -> asyncpg.Pool:
        """Pool or a clear error if connect() was never awaited"""
        if self.pool is None:
            raise RuntimeError("ChunkDatabase is not connected; call connect() first")
        return self.pool

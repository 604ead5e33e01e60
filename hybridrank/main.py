"""
Command-line entry point for hybrid search

Wires settings → database pool → collaborators → HybridSearchService, runs
one ranking pass and prints the ranked chunks as JSON.

Usage:
    python -m hybridrank.main --scope <file-id> "what is the refund policy"
    python -m hybridrank.main --scope <file-id> --context "exam topics"
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import List, Optional

from .config import Settings, load_environment
from .context import build_context
from .database import ChunkDatabase
from .logging_config import setup_logging
from .models import ScoredChunk
from .retrievers import RetrievalError, RetrieverFactory
from .search import HybridSearchService, create_executor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hybridrank",
        description="Hybrid (vector + full-text) search with MMR diversification",
    )
    parser.add_argument("query", help="Query text (may be empty)")
    parser.add_argument("--scope", required=True, help="Document id to search in")
    parser.add_argument(
        "--context",
        action="store_true",
        help="Print the prompt context block instead of JSON results",
    )
    parser.add_argument("--log-file", default="logs/hybrid-rank.log", help="Base path for session logs")
    return parser


def chunks_to_json(chunks: List[ScoredChunk]) -> str:
    return json.dumps([asdict(chunk) for chunk in chunks], ensure_ascii=False, indent=2, default=str)


async def run(settings: Settings, scope_id: str, query: str) -> List[ScoredChunk]:
    """Run one hybrid search with freshly created resources, then release them"""
    executor = create_executor(settings.worker_threads)
    database = ChunkDatabase(settings.database_url)
    try:
        await database.connect()
        retrievers = RetrieverFactory.create(settings, database, executor=executor)
        service = HybridSearchService(
            retrievers.vector_search,
            retrievers.lexical_search,
            retrievers.embedding_lookup,
            settings.ranking,
            timeout_seconds=settings.search_timeout_seconds,
        )
        return await service.hybrid_search(scope_id, query)
    finally:
        await database.disconnect()
        executor.shutdown(wait=False)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_environment()
    try:
        settings = Settings.from_env()
    except ValueError as e:
        # pydantic.ValidationError is a ValueError; logging is not configured yet
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    console_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    setup_logging(log_file=args.log_file, console_level=console_level)

    try:
        results = asyncio.run(run(settings, args.scope, args.query))
    except (RetrievalError, ValueError) as e:
        logger.error(f"Hybrid search failed: {e}")
        return 1

    if args.context:
        print(build_context(results, settings.context_max_chunks, settings.context_max_chars))
    else:
        print(chunks_to_json(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Data model shared by the ranking stages and the retrieval collaborators"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class ScoredChunk:
    """
    One retrieved chunk of a document, with its scores for the current request.

    Instances are never mutated: every stage (fusion, MMR, rerank) returns
    new values via dataclasses.replace().
    """
    id: str                    # Chunk identifier (same in vector and lexical stores)
    scope_id: str              # Document the chunk belongs to
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    vector_score: float = 0.0  # 0.0 when found only lexically
    bm25_score: float = 0.0    # 0.0 when found only by vector search
    fused_score: float = 0.0   # Derived by fusion, never an input


@dataclass(frozen=True)
class LexicalHit:
    """Single hit returned by the lexical (full-text) collaborator"""
    id: str
    scope_id: str
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    bm25_score: float = 0.0

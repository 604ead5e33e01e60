"""
Hybrid relevance ranking for document-scoped retrieval.

Pipeline per request:
1. Fan-out: vector search + lexical search (concurrent)
2. Fusion: per-query min-max normalization, weighted blend
3. MMR: diversify the top of the fused ranking
4. Lexical rerank: small bounded bonus for literal query-term hits
"""

__version__ = "0.1.0"

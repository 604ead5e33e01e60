"""Unit test configuration - isolate tests from the developer's environment"""

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Unit tests never see a developer's ranking/database env vars"""
    for name in (
        "DATABASE_URL", "CHUNK_TABLE", "SCOPE_METADATA_KEY", "FTS_LANGUAGE",
        "GCP_PROJECT_ID", "GOOGLE_CLOUD_PROJECT", "GCP_LOCATION", "GOOGLE_CLOUD_LOCATION",
        "EMBEDDING_MODEL", "SEARCH_WORKER_THREADS", "SEARCH_TIMEOUT_SECONDS",
        "RAG_CONTEXT_MAX_CHARS", "RAG_CONTEXT_MAX_CHUNKS", "LOG_LEVEL",
        "RAG_TOP_K", "RAG_ALPHA", "RAG_MMR_K", "RAG_MMR_LAMBDA",
    ):
        monkeypatch.delenv(name, raising=False)

"""
Shared pytest fixtures for the chat backend test suite.

External services are replaced with deterministic in-memory fakes so tests
never touch Redis, Pinecone, OpenAI or reCAPTCHA.
"""

from __future__ import annotations

import pytest
import redis
from fastapi.testclient import TestClient

from uwchat_backend.core.exceptions import EmbeddingError, VectorStoreError, CompletionError
from uwchat_backend.services.container import Services
from uwchat_backend.services.rate_limiter import RateLimiter
from uwchat_backend.services.retriever import VectorRetriever


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeCounterStore:
    """Redis-like get/incr/ttl/expire with a manual clock."""

    def __init__(self):
        self.now = 0.0
        self.values: dict[str, int] = {}
        self.expiry: dict[str, float] = {}
        self.expire_calls: list[tuple[str, int]] = []
        self.fail = False
        self.fail_next_expire = False

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def _check(self) -> None:
        if self.fail:
            raise redis.ConnectionError("counter store down")

    def _purge(self, key: str) -> None:
        deadline = self.expiry.get(key)
        if deadline is not None and self.now >= deadline:
            self.values.pop(key, None)
            self.expiry.pop(key, None)

    def get(self, key: str):
        self._check()
        self._purge(key)
        value = self.values.get(key)
        return None if value is None else str(value)

    def incr(self, key: str) -> int:
        self._check()
        self._purge(key)
        self.values[key] = self.values.get(key, 0) + 1
        return self.values[key]

    def ttl(self, key: str) -> int:
        self._check()
        self._purge(key)
        if key not in self.values:
            return -2
        deadline = self.expiry.get(key)
        if deadline is None:
            return -1
        return int(deadline - self.now)

    def expire(self, key: str, seconds: int) -> bool:
        self._check()
        if self.fail_next_expire:
            self.fail_next_expire = False
            raise redis.ConnectionError("expire lost")
        self.expire_calls.append((key, seconds))
        self.expiry[key] = self.now + seconds
        return True


class FakeVerifier:
    def __init__(self, result: bool = True, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    def verify(self, token: str, remote_ip: str | None = None) -> bool:
        self.calls.append((token, remote_ip))
        if self.error is not None:
            raise self.error
        return self.result


class FakeEmbedder:
    def __init__(self, fail: bool = False, fail_on: set[str] | None = None):
        self.fail = fail
        self.fail_on = fail_on or set()
        self.calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    def _vector(self, text: str) -> list[float]:
        return [float(len(text)), 1.0, 0.0]

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail or text in self.fail_on:
            raise EmbeddingError("embedding service down")
        return self._vector(text)

    def embed_many(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        if self.fail:
            raise EmbeddingError("embedding service down")
        return [self._vector(t) for t in texts]


class FakeVectorStore:
    def __init__(self, matches: list[dict] | None = None, fail: bool = False):
        self.matches = matches or []
        self.fail = fail
        self.queries: list[tuple[list[float], int]] = []
        self.upserts: list[list[tuple]] = []

    def query(self, embedding: list[float], top_k: int) -> list[dict]:
        self.queries.append((embedding, top_k))
        if self.fail:
            raise VectorStoreError("pinecone unreachable")
        return list(self.matches)

    def upsert(self, vectors: list[tuple]) -> None:
        if self.fail:
            raise VectorStoreError("pinecone unreachable")
        self.upserts.append(list(vectors))


class FakeCompleter:
    def __init__(self, answer: str = "The library opens at 8am.", fail: bool = False):
        self.answer = answer
        self.fail = fail
        self.calls: list[list[dict]] = []

    def complete(self, messages: list[dict]) -> str:
        self.calls.append(messages)
        if self.fail:
            raise CompletionError("model overloaded")
        return self.answer


def make_match(chunk_id: str, text: str, score: float, file_name: str = "library.txt") -> dict:
    return {
        "id": chunk_id,
        "score": score,
        "metadata": {
            "text": text,
            "chunkId": chunk_id,
            "fileName": file_name,
            "ingestedAt": "2025-01-15T12:00:00+00:00",
        },
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def counter_store() -> FakeCounterStore:
    return FakeCounterStore()


@pytest.fixture
def rate_limiter(counter_store: FakeCounterStore) -> RateLimiter:
    return RateLimiter(counter_store, max_requests=100, window_seconds=86400)


@pytest.fixture
def vector_store() -> FakeVectorStore:
    return FakeVectorStore(
        matches=[
            make_match("chunk-1-0-library.txt", "Dana Porter Library opens at 8am.", 0.91),
            make_match("chunk-1-1-library.txt", "DC Library is open 24 hours during exams.", 0.85),
        ]
    )


@pytest.fixture
def services(rate_limiter: RateLimiter, vector_store: FakeVectorStore) -> Services:
    return Services(
        verifier=FakeVerifier(),
        rate_limiter=rate_limiter,
        embedder=FakeEmbedder(),
        vector_store=vector_store,
        retriever=VectorRetriever(vector_store, top_k=5),
        completer=FakeCompleter(),
    )


@pytest.fixture
def client(services: Services):
    """TestClient with the service container swapped for fakes."""
    from uwchat_backend.api.deps import get_services
    from uwchat_backend.main import app

    app.dependency_overrides[get_services] = lambda: services
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def chat_payload() -> dict:
    return {
        "messages": [{"role": "user", "content": "what time is the library open"}],
        "query": "what time is the library open",
        "humanVerificationToken": "token-123",
    }

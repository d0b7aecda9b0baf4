# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-02-03
# Description: conftest.py
# -----------------------------------------------------------------------------

import sys
from pathlib import Path

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from typing import Dict, List, Sequence

import pytest

from embedding.EmbeddingProvider import validate_texts
from errors.SearchErrors import Unauthenticated, Unavailable
from indexing.EntityIndexer import EntityIndexer
from services.IndexingService import IndexingService
from services.SearchService import SearchService
from store.InMemoryDocumentStore import InMemoryDocumentStore
from tenancy.TenantGuard import TenantContext, TenantGuard


class FakeEmbedder:
    """Deterministic embedder: known texts map to fixed vectors."""

    model_name = "fake-embedding"

    def __init__(self, vectors: Dict[str, List[float]] | None = None, default: Sequence[float] = (0.0, 0.0, 1.0)):
        self.vectors = dict(vectors or {})
        self.default = list(default)
        self.fail_on: set = set()
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        validate_texts([text])
        self.calls.append(text)
        if text in self.fail_on:
            raise Unavailable(f"embedding provider unavailable for {text!r}")
        return list(self.vectors.get(text, self.default))

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        return [self.embed(t) for t in texts]

    def test_connection(self) -> bool:
        return True


class FakeIdentityProvider:
    """Token string -> claims. Unknown tokens are rejected."""

    def __init__(self, tokens: Dict[str, dict]):
        self.tokens = tokens

    def verify(self, token: str) -> dict:
        if token not in self.tokens:
            raise Unauthenticated("Invalid or expired token")
        return dict(self.tokens[token])


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider({
        "token-org-1": {"sub": "user-1", "organizationId": "org-1"},
        "token-org-2": {"sub": "user-2", "organizationId": "org-2"},
        "token-no-org-claim": {"sub": "user-3"},
    })


@pytest.fixture
def guard(identity_provider, store) -> TenantGuard:
    return TenantGuard(identity_provider=identity_provider, store=store)


@pytest.fixture
def tenant() -> TenantContext:
    return TenantContext(user_id="user-1", organization_id="org-1")


@pytest.fixture
def other_tenant() -> TenantContext:
    return TenantContext(user_id="user-2", organization_id="org-2")


@pytest.fixture
def indexer(embedder, store) -> EntityIndexer:
    return EntityIndexer(embedder=embedder, store=store, clock=lambda: "2026-02-01T00:00:00+00:00")


@pytest.fixture
def search_service(embedder, store, guard) -> SearchService:
    return SearchService(embedder=embedder, store=store, guard=guard, default_collections=["projects", "contacts"])


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def indexing_service(store, indexer, guard, sleeps) -> IndexingService:
    return IndexingService(
        store=store,
        indexer=indexer,
        guard=guard,
        sleep=sleeps.append,
    )

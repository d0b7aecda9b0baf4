# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-01
# Description: SearchService
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import settings
from embedding.EmbeddingProvider import EmbeddingProvider
from errors.SearchErrors import FailedPrecondition, InvalidArgument, NotFound
from similarity.SearchResult import SearchResult
from similarity.SimilarityEngine import SimilarityEngine
from store.DocumentStore import DocumentStore, StoredDocument
from store.filters import Eq, NotNull
from tenancy.TenantGuard import TenantContext, TenantGuard
from utility.logging_utils import get_class_logger


class SearchService:
    """
    Query-time semantic search, always scoped to the caller's organization.

      - semantic_search: one collection, top `limit` by cosine similarity
      - search_all:      several collections, each searched for `limit`
                         results, then merged and re-ranked to `limit`
      - find_similar:    neighbours of an existing record (source excluded)

    Read-only; safe to run concurrently with indexing jobs. Records that are
    mid-reindex may be stale or missing from results.
    """

    def __init__(
        self,
        *,
        embedder: EmbeddingProvider,
        store: DocumentStore,
        guard: TenantGuard,
        engine: Optional[SimilarityEngine] = None,
        default_collections: Optional[Sequence[str]] = None,
        max_limit: int = settings.MAX_SEARCH_LIMIT,
        logger: logging.Logger | None = None,
    ) -> None:
        self.embedder = embedder
        self.store = store
        self.guard = guard
        self.engine = engine or SimilarityEngine(snippet_max_length=settings.SNIPPET_MAX_LENGTH)
        self.default_collections = list(default_collections or settings.SEARCH_ALL_COLLECTIONS)
        self.max_limit = max_limit
        self.logger = logger or get_class_logger(self.__class__)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _require(value: Optional[str], name: str) -> str:
        value = (value or "").strip()
        if not value:
            raise InvalidArgument(f"{name} is required")
        return value

    def _check_limit(self, limit: int) -> int:
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            raise InvalidArgument("limit must be a positive integer")
        return min(limit, self.max_limit)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def _candidates(self, collection: str, organization_id: str) -> List[StoredDocument]:
        return self.store.query(
            collection,
            [Eq("organizationId", organization_id), NotNull("embedding")],
        )

    @staticmethod
    def _public_data(data: Dict[str, Any]) -> Dict[str, Any]:
        # vectors are large and not useful to callers
        return {k: v for k, v in data.items() if k != "embedding"}

    def _score(
        self,
        *,
        collection: str,
        organization_id: str,
        query_vector: Sequence[float],
        docs: Iterable[StoredDocument],
        query_text: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> List[SearchResult]:
        results: List[SearchResult] = []
        for doc in docs:
            if doc.id == exclude_id:
                continue
            if doc.data.get("organizationId") != organization_id:
                # the store filter should make this unreachable
                self.logger.error("Dropping %s/%s: organization mismatch in query result", collection, doc.id)
                continue
            embedding = doc.data.get("embedding")
            if not embedding:
                continue

            score = self.engine.cosine_similarity(query_vector, embedding)
            metadata: Dict[str, Any] = {}
            if query_text is not None:
                metadata["snippet"] = self.engine.extract_snippet(doc.data.get("embeddingText") or "", query_text)

            results.append(SearchResult(
                id=doc.id,
                collection=collection,
                score=score,
                data=self._public_data(doc.data),
                metadata=metadata,
            ))
        return results

    def _search_with_vector(
        self,
        *,
        query: str,
        query_vector: Sequence[float],
        collection: str,
        organization_id: str,
        limit: int,
    ) -> List[SearchResult]:
        docs = self._candidates(collection, organization_id)
        if not docs:
            self.logger.info("No documents with embeddings in '%s' for org '%s'", collection, organization_id)
            return []

        scored = self._score(
            collection=collection,
            organization_id=organization_id,
            query_vector=query_vector,
            docs=docs,
            query_text=query,
        )
        return self.engine.rank_by(scored, key=lambda r: r.score, limit=limit)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    def semantic_search(
        self,
        tenant: TenantContext,
        query: str,
        collection: str,
        limit: int = settings.DEFAULT_SEARCH_LIMIT,
    ) -> List[SearchResult]:
        query = self._require(query, "query")
        collection = self._require(collection, "collection")
        limit = self._check_limit(limit)

        self.logger.info(
            "semantic_search org='%s' collection='%s' limit=%d", tenant.organization_id, collection, limit
        )
        query_vector = self.embedder.embed(query)
        results = self._search_with_vector(
            query=query,
            query_vector=query_vector,
            collection=collection,
            organization_id=tenant.organization_id,
            limit=limit,
        )
        self.logger.info("semantic_search returned %d results from '%s'", len(results), collection)
        return results

    def search_all(
        self,
        tenant: TenantContext,
        query: str,
        collections: Optional[Sequence[str]] = None,
        limit: int = settings.DEFAULT_SEARCH_LIMIT,
    ) -> List[SearchResult]:
        query = self._require(query, "query")
        limit = self._check_limit(limit)
        # de-duplicate, keep order
        targets = list(dict.fromkeys(c.strip() for c in (collections or self.default_collections) if c and c.strip()))
        if not targets:
            raise InvalidArgument("at least one collection is required")

        self.logger.info(
            "search_all org='%s' collections=%d limit=%d", tenant.organization_id, len(targets), limit
        )

        # One embedding call for the whole fan-out
        query_vector = self.embedder.embed(query)

        merged: List[SearchResult] = []
        failed: List[str] = []
        for collection in targets:
            try:
                # `limit` from every collection so none is under-represented in the merge
                merged.extend(self._search_with_vector(
                    query=query,
                    query_vector=query_vector,
                    collection=collection,
                    organization_id=tenant.organization_id,
                    limit=limit,
                ))
            except Exception as e:
                failed.append(collection)
                self.logger.error("search_all: collection '%s' failed, continuing: %s", collection, e)

        results = self.engine.rank_by(merged, key=lambda r: r.score, limit=limit)
        self.logger.info(
            "search_all returned %d results (%d candidates, %d failed collections)",
            len(results),
            len(merged),
            len(failed),
        )
        return results

    def find_similar(
        self,
        tenant: TenantContext,
        collection: str,
        doc_id: str,
        limit: int = settings.DEFAULT_SIMILAR_LIMIT,
    ) -> List[SearchResult]:
        collection = self._require(collection, "collection")
        doc_id = self._require(doc_id, "docId")
        limit = self._check_limit(limit)

        source = self.store.get(collection, doc_id)
        if source is None:
            raise NotFound(f"Document {doc_id} not found in {collection}")
        self.guard.ensure_owns(source.data, tenant.organization_id)

        source_vector = source.data.get("embedding")
        if not source_vector:
            raise FailedPrecondition(f"Document {doc_id} has no embedding")

        scored = self._score(
            collection=collection,
            organization_id=tenant.organization_id,
            query_vector=source_vector,
            docs=self._candidates(collection, tenant.organization_id),
            query_text=None,
            exclude_id=doc_id,
        )
        results = self.engine.rank_by(scored, key=lambda r: r.score, limit=limit)
        self.logger.info("find_similar %s/%s returned %d results", collection, doc_id, len(results))
        return results

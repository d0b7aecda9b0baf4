# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-03
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from typing import Optional

import settings
from config.Config import Config
from embedding.EmbedderFactory import build_embedder
from indexing.EntityIndexer import EntityIndexer
from services.HealthService import HealthService
from services.IndexValidationService import IndexValidationService
from services.IndexingService import IndexingService
from services.SearchService import SearchService
from similarity.SimilarityEngine import SimilarityEngine
from store.ChromaDocumentStore import ChromaDocumentStore
from store.DocumentStore import DocumentStore
from store.InMemoryDocumentStore import InMemoryDocumentStore
from tenancy.IdentityProvider import JWTIdentityProvider
from tenancy.TenantGuard import TenantGuard
from utility.logging_utils import get_class_logger


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.
    """

    def __init__(self, cfg: Optional[Config] = None) -> None:
        self.logger = get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger.info("Config: %s", self.cfg.summary())

        # Core infrastructure
        self.store = self._build_store()
        self.embedder = build_embedder(self.cfg)
        self.engine = SimilarityEngine(snippet_max_length=settings.SNIPPET_MAX_LENGTH)

        # Identity / tenancy
        self.identity_provider = JWTIdentityProvider(self.cfg)
        self.guard = TenantGuard(
            identity_provider=self.identity_provider,
            store=self.store,
            org_claim=self.cfg.org_claim,
            users_collection=self.cfg.users_collection,
        )

        self.indexer = EntityIndexer(embedder=self.embedder, store=self.store)

        # Return a singleton SearchService instance
        self.search_service = SearchService(
            embedder=self.embedder,
            store=self.store,
            guard=self.guard,
            engine=self.engine,
        )

        # Return a singleton IndexingService instance
        self.indexing_service = IndexingService(
            store=self.store,
            indexer=self.indexer,
            guard=self.guard,
            job_collection=self.cfg.job_collection,
            batch_size=self.cfg.job_batch_size,
            rate_limit=self.cfg.job_rate_limit,
            persist_every=self.cfg.job_persist_every,
            max_errors=self.cfg.job_max_errors,
        )

        self.validation_service = IndexValidationService(
            store=self.store,
            expected_dimensions=self.cfg.embedding_dimensions,
        )

        self.health_service = HealthService(embedder=self.embedder, store=self.store)

    def _build_store(self) -> DocumentStore:
        if self.cfg.store_backend.lower() == "chroma":
            return ChromaDocumentStore(cfg=self.cfg)
        self.logger.warning("Using in-memory document store; data is lost on restart")
        return InMemoryDocumentStore()

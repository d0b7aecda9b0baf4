# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-03
# Description: HealthService.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Callable, Dict, Optional

from embedding.EmbeddingProvider import EmbeddingProvider
from store.DocumentStore import DocumentStore
from utility.logging_utils import get_class_logger


class HealthService:
    """
    Runs connectivity checks against the embedding provider and the document
    store and reports {status, results, summary} for the API layer.
    """

    def __init__(
        self,
        *,
        embedder: EmbeddingProvider,
        store: DocumentStore,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.embedder = embedder
        self.store = store
        self.logger = logger or get_class_logger(self.__class__)

    def _check(self, name: str, fn: Callable[[], bool]) -> bool:
        try:
            self.logger.info("Running %s check", name)
            ok = bool(fn())
        except Exception as e:
            self.logger.exception("%s check raised an exception: %s", name, e)
            ok = False

        if ok:
            self.logger.info("%s: PASS", name)
        else:
            self.logger.error("%s: FAIL", name)
        return ok

    def deep_health(self) -> Dict[str, Any]:
        results = {
            "embedding_health": self._check("Embedding", self.embedder.test_connection),
            "store_health": self._check("DocumentStore", self.store.test_connection),
        }

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed
        self.logger.info("Health summary: %d total, %d passed, %d failed", total, passed, failed)

        return {
            "status": "ok" if failed == 0 else "error",
            "results": results,
            "summary": {"total": total, "passed": passed, "failed": failed},
        }

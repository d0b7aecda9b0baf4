# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-31
# Description: EntityIndexer
# -----------------------------------------------------------------------------
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from embedding.EmbeddingProvider import EmbeddingProvider
from errors.SearchErrors import InvalidArgument
from store.DocumentStore import DocumentStore
from utility.logging_utils import get_class_logger

# Fields the indexer owns; caller metadata can never overwrite them
RESERVED_FIELDS = ("embedding", "embeddingText", "embeddingUpdatedAt", "embeddingModel")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class EntityIndexer:
    """
    Embeds a record's searchable text and writes the vector back onto the
    record in one merge-update:

        {**metadata, embedding, embeddingText, embeddingUpdatedAt, embeddingModel}

    The record must already exist (the store's update raises NotFound).
    Re-indexing the same text fully overwrites the previous embedding.
    """

    def __init__(
        self,
        *,
        embedder: EmbeddingProvider,
        store: DocumentStore,
        clock: Callable[[], str] = utc_now_iso,
        logger: logging.Logger | None = None,
    ) -> None:
        self.embedder = embedder
        self.store = store
        self.clock = clock
        self.logger = logger or get_class_logger(self.__class__)

    def index_entity(
        self,
        collection: str,
        doc_id: str,
        text: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Returns False (and writes nothing) when ``text`` is empty, True once
        the embedding is stored.
        """
        if not collection or not doc_id:
            raise InvalidArgument("collection and doc_id are required")
        if not text or not text.strip():
            self.logger.debug("Nothing to index for %s/%s (empty text)", collection, doc_id)
            return False

        embedding = self.embedder.embed(text)

        fields: Dict[str, Any] = {
            k: v for k, v in (metadata or {}).items() if k not in RESERVED_FIELDS
        }
        fields.update({
            "embedding": [float(x) for x in embedding],
            "embeddingText": text,
            "embeddingUpdatedAt": self.clock(),
            "embeddingModel": getattr(self.embedder, "model_name", None),
        })
        self.store.update(collection, doc_id, fields)

        self.logger.info("Indexed entity %s/%s (dim=%d)", collection, doc_id, len(embedding))
        return True

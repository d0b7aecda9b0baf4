# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-27
# Description: InMemoryDocumentStore
# -----------------------------------------------------------------------------
import copy
import threading
from typing import Any, Dict, List, Optional, Sequence

from errors.SearchErrors import InvalidArgument, NotFound
from store.DocumentStore import DocumentStore, StoredDocument
from store.filters import Filter, matches_all
from utility.logging_utils import get_class_logger


class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed store for local development and tests.

    Reads hand out deep copies so callers can never mutate stored records
    outside of ``set`` / ``update``.
    """

    def __init__(self, logger=None) -> None:
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.RLock()
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def _check_key(collection: str, doc_id: str) -> None:
        if not collection or not doc_id:
            raise InvalidArgument("collection and doc_id must not be empty")

    def test_connection(self) -> bool:
        return True

    def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        self._check_key(collection, doc_id)
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            if data is None:
                return None
            return StoredDocument(id=doc_id, data=copy.deepcopy(data))

    def query(self, collection: str, filters: Sequence[Filter] = ()) -> List[StoredDocument]:
        with self._lock:
            rows = self._collections.get(collection, {})
            out = [
                StoredDocument(id=doc_id, data=copy.deepcopy(data))
                for doc_id, data in sorted(rows.items())
                if matches_all(data, filters)
            ]
        self.logger.debug("Query '%s' (%d filters) -> %d documents", collection, len(filters), len(out))
        return out

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._check_key(collection, doc_id)
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(dict(data))

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        self._check_key(collection, doc_id)
        with self._lock:
            rows = self._collections.get(collection, {})
            if doc_id not in rows:
                raise NotFound(f"Document {doc_id} not found in {collection}")
            merged = dict(rows[doc_id])
            merged.update(copy.deepcopy(fields))
            rows[doc_id] = merged

    def delete(self, collection: str, doc_id: str) -> bool:
        self._check_key(collection, doc_id)
        with self._lock:
            return self._collections.get(collection, {}).pop(doc_id, None) is not None

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-01-28
# Description: ChromaDocumentStore
# -----------------------------------------------------------------------------
import json
import threading
from dataclasses import dataclass
from typing import Sequence, Dict, Any, List, Optional

import chromadb
from chromadb import ClientAPI
from chromadb.api.models import Collection

from config.Config import Config
from errors.SearchErrors import InvalidArgument, NotFound
from store.DocumentStore import DocumentStore, StoredDocument
from store.filters import Filter, NotNull, matches_all
from utility.logging_utils import get_class_logger

EMBEDDING_FIELD = "embedding"
HAS_EMBEDDING_KEY = "has_embedding"

# Never copied into row metadata (too large, or stored elsewhere on the row)
_METADATA_EXCLUDED = {EMBEDDING_FIELD, "embeddingText"}


@dataclass
class ChromaDocumentStore(DocumentStore):
    """
    Document store on top of Chroma.

    Row layout per record:
      - id:        document id
      - document:  JSON body of the record (without the embedding)
      - embedding: the record's embedding, or a zero vector when it has none
      - metadata:  organizationId, has_embedding and the scalar top-level fields,
                   so equality / membership / numeric range filters run in Chroma
    """
    cfg: Config
    client: Optional[ClientAPI] = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.dimensions = int(self.cfg.embedding_dimensions)
        self._collections: Dict[str, Collection] = {}
        self._write_lock = threading.RLock()

        if self.client is None:
            if self.cfg.uses_chroma_cloud:
                self.logger.info(
                    "Initialising Chroma Cloud client (tenant=%s, database=%s)",
                    self.cfg.chroma_tenant,
                    self.cfg.chroma_database,
                )
                self.client = chromadb.CloudClient(
                    tenant=self.cfg.chroma_tenant,
                    database=self.cfg.chroma_database,
                    api_key=self.cfg.chroma_api_key,
                )
            else:
                self.logger.info("Initialising local Chroma client (path=%s)", self.cfg.chroma_path)
                self.client = chromadb.PersistentClient(path=self.cfg.chroma_path)

    def _collection(self, name: str) -> Collection:
        if not name:
            raise InvalidArgument("collection must not be empty")
        coll = self._collections.get(name)
        if coll is None:
            # Vectors are always supplied by us; similarity is computed outside Chroma
            coll = self.client.get_or_create_collection(name=name, embedding_function=None)
            self._collections[name] = coll
            self.logger.debug("Chroma collection ready: '%s'", name)
        return coll

    def test_connection(self) -> bool:
        """
        Simple health check: can we talk to Chroma at all?
        """
        try:
            self.client.heartbeat()
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    # ------------------------------------------------------------------
    # Row <-> record conversion
    # ------------------------------------------------------------------
    def _to_row(self, data: Dict[str, Any]):
        body = {k: v for k, v in data.items() if k != EMBEDDING_FIELD}
        embedding = data.get(EMBEDDING_FIELD)
        has_embedding = isinstance(embedding, (list, tuple)) and len(embedding) > 0

        if has_embedding:
            vector = [float(x) for x in embedding]
        else:
            vector = [0.0] * self.dimensions

        metadata: Dict[str, Any] = {HAS_EMBEDDING_KEY: has_embedding}
        for key, value in body.items():
            if key in _METADATA_EXCLUDED or value is None:
                continue
            if isinstance(value, (str, int, float, bool)):
                metadata[key] = value

        return json.dumps(body, default=str), vector, metadata

    @staticmethod
    def _from_row(document: Optional[str], embedding: Any, metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        data: Dict[str, Any] = json.loads(document) if document else {}
        if metadata and metadata.get(HAS_EMBEDDING_KEY) and embedding is not None:
            data[EMBEDDING_FIELD] = [float(x) for x in embedding]
        return data

    def _rows(self, res: Dict[str, Any]) -> List[StoredDocument]:
        ids = res.get("ids") or []
        docs = res.get("documents")
        embs = res.get("embeddings")
        metas = res.get("metadatas")

        out: List[StoredDocument] = []
        for i, doc_id in enumerate(ids):
            document = docs[i] if docs is not None and i < len(docs) else None
            embedding = embs[i] if embs is not None and i < len(embs) else None
            metadata = metas[i] if metas is not None and i < len(metas) else None
            out.append(StoredDocument(id=doc_id, data=self._from_row(document, embedding, metadata)))
        return out

    @staticmethod
    def _build_where(filters: Sequence[Filter]) -> Optional[Dict[str, Any]]:
        clauses: List[Dict[str, Any]] = []
        for f in filters:
            if isinstance(f, NotNull) and f.field == EMBEDDING_FIELD:
                clauses.append({HAS_EMBEDDING_KEY: {"$eq": True}})
                continue
            if "." in f.field:
                continue
            clause = f.to_where()
            if clause is not None:
                clauses.append(clause)

        if not clauses:
            return None
        return clauses[0] if len(clauses) == 1 else {"$and": clauses}

    # ------------------------------------------------------------------
    # DocumentStore
    # ------------------------------------------------------------------
    def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        if not doc_id:
            raise InvalidArgument("doc_id must not be empty")
        res = self._collection(collection).get(
            ids=[doc_id],
            include=["documents", "embeddings", "metadatas"],
        )
        rows = self._rows(res)
        return rows[0] if rows else None

    def query(self, collection: str, filters: Sequence[Filter] = ()) -> List[StoredDocument]:
        where = self._build_where(filters)
        self.logger.debug("Querying Chroma collection '%s' (where=%s)", collection, where)

        kwargs: Dict[str, Any] = {"include": ["documents", "embeddings", "metadatas"]}
        if where is not None:
            kwargs["where"] = where
        res = self._collection(collection).get(**kwargs)

        # Filters that could not be pushed down are applied here; re-checking all is harmless
        rows = [r for r in self._rows(res) if matches_all(r.data, filters)]
        rows.sort(key=lambda r: r.id)
        self.logger.debug("Chroma query '%s' returned %d documents", collection, len(rows))
        return rows

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        if not doc_id:
            raise InvalidArgument("doc_id must not be empty")
        document, vector, metadata = self._to_row(data)
        with self._write_lock:
            self._collection(collection).upsert(
                ids=[doc_id],
                documents=[document],
                embeddings=[vector],
                metadatas=[metadata],
            )

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        with self._write_lock:
            existing = self.get(collection, doc_id)
            if existing is None:
                raise NotFound(f"Document {doc_id} not found in {collection}")
            merged = dict(existing.data)
            merged.update(fields)
            # single upsert: body, vector and metadata land together
            self.set(collection, doc_id, merged)

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._write_lock:
            if self.get(collection, doc_id) is None:
                return False
            self._collection(collection).delete(ids=[doc_id])
            return True

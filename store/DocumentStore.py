# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-27
# Description: DocumentStore
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field
from typing import Protocol, Sequence, Dict, Any, List, Optional, runtime_checkable

from store.filters import Filter


@dataclass
class StoredDocument:
    """A record read from the store: its id plus the JSON-like body."""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class DocumentStore(Protocol):
    """
    Tenant-partitioned document store used by search and indexing.

    Records are plain dicts. ``query`` returns documents ordered by id.
    ``update`` is a single atomic merge of top-level fields and raises
    ``NotFound`` when the document does not exist; ``set`` creates or
    fully overwrites.
    """

    def test_connection(self) -> bool:
        ...

    def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        ...

    def query(self, collection: str, filters: Sequence[Filter] = ()) -> List[StoredDocument]:
        ...

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        ...

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        ...

    def delete(self, collection: str, doc_id: str) -> bool:
        ...

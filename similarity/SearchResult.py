# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-26
# Description: SearchResult
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class SearchResult:
    """One scored record. Computed per query, never persisted."""
    id: str
    collection: str
    score: float
    data: Dict[str, Any]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "collection": self.collection,
            "score": self.score,
            "data": self.data,
            "metadata": self.metadata,
        }

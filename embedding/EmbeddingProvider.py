# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-28
# Description: EmbeddingProvider
# -----------------------------------------------------------------------------
from typing import List, Protocol, Sequence, runtime_checkable

from errors.SearchErrors import InvalidArgument


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Text -> fixed-length vector. Stateless between calls apart from the
    configured credentials / model; nothing is cached.
    """

    model_name: str

    def embed(self, text: str) -> List[float]:
        ...

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        ...

    def test_connection(self) -> bool:
        ...


def validate_texts(texts: Sequence[str]) -> List[str]:
    """Reject empty / whitespace-only inputs before any network call."""
    out: List[str] = []
    for i, text in enumerate(texts):
        if not isinstance(text, str) or not text.strip():
            raise InvalidArgument(f"Cannot embed empty text (input #{i})")
        out.append(text)
    return out

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-26
# Description: SimilarityEngine
# -----------------------------------------------------------------------------
"""
Pure functions used to score and present search results:

  - cosine_similarity: relevance between a query vector and a record vector
  - rank:              stable descending sort + truncation
  - extract_snippet:   display window around the first matched query term
"""
from typing import Any, Callable, Iterable, List, Sequence, Tuple, TypeVar

import numpy as np

from errors.SearchErrors import InvalidArgument

T = TypeVar("T")

ELLIPSIS = "..."


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b|), clamped to [-1, 1].

    Returns 0.0 when either vector has zero norm. That is "no signal",
    not a similarity judgement.
    """
    if len(a) != len(b):
        raise InvalidArgument(f"Vectors must have the same length ({len(a)} != {len(b)})")

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)

    denom = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0

    score = float(np.dot(va, vb)) / denom
    # float error can push |score| just past 1
    return max(-1.0, min(1.0, score))


def rank(scored: Iterable[Tuple[Any, float]], limit: int) -> List[Tuple[Any, float]]:
    """Sort (id, score) pairs by score descending; equal scores keep insertion order."""
    return rank_by(list(scored), key=lambda pair: pair[1], limit=limit)


def rank_by(items: Iterable[T], key: Callable[[T], float], limit: int) -> List[T]:
    if limit < 0:
        raise InvalidArgument("limit must not be negative")
    # sorted() is stable, so ties stay in their original order
    ordered = sorted(items, key=key, reverse=True)
    return ordered[:limit]


def extract_snippet(text: str, query: str, max_length: int = 200) -> str:
    text = text or ""
    if max_length <= 0:
        return ""

    text_lower = text.lower()
    start_index = -1
    for term in (query or "").lower().split():
        idx = text_lower.find(term)
        if idx != -1 and (start_index == -1 or idx < start_index):
            start_index = idx

    if start_index == -1:
        # no term found: left-anchored truncation
        if len(text) > max_length:
            return text[:max_length] + ELLIPSIS
        return text

    half = max_length // 2
    snippet_start = max(0, start_index - half)
    snippet_end = min(len(text), snippet_start + max_length)

    snippet = text[snippet_start:snippet_end]
    if snippet_start > 0:
        snippet = ELLIPSIS + snippet
    if snippet_end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet


class SimilarityEngine:
    """
    Injectable bundle of the functions above, so the search service can be
    handed a configured instance (snippet width) or a test double.
    """

    def __init__(self, snippet_max_length: int = 200) -> None:
        self.snippet_max_length = snippet_max_length

    def cosine_similarity(self, a: Sequence[float], b: Sequence[float]) -> float:
        return cosine_similarity(a, b)

    def rank(self, scored: Iterable[Tuple[Any, float]], limit: int) -> List[Tuple[Any, float]]:
        return rank(scored, limit)

    def rank_by(self, items: Iterable[T], key: Callable[[T], float], limit: int) -> List[T]:
        return rank_by(items, key, limit)

    def extract_snippet(self, text: str, query: str, max_length: int | None = None) -> str:
        return extract_snippet(text, query, self.snippet_max_length if max_length is None else max_length)

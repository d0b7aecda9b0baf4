# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: search.py
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

import settings


class SemanticSearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    collection: str = Field(..., min_length=1)
    limit: int = Field(settings.DEFAULT_SEARCH_LIMIT, ge=1, le=settings.MAX_SEARCH_LIMIT)


class SearchAllRequest(BaseModel):
    query: str = Field(..., min_length=1)
    collections: Optional[List[str]] = None
    limit: int = Field(settings.DEFAULT_SEARCH_LIMIT, ge=1, le=settings.MAX_SEARCH_LIMIT)


class FindSimilarRequest(BaseModel):
    collection: str = Field(..., min_length=1)
    docId: str = Field(..., min_length=1)
    limit: int = Field(settings.DEFAULT_SIMILAR_LIMIT, ge=1, le=settings.MAX_SEARCH_LIMIT)


class SearchHit(BaseModel):
    id: str
    collection: str
    score: float
    data: Dict[str, Any]
    metadata: Dict[str, Any] = {}


class SearchResponse(BaseModel):
    results: List[SearchHit]
    count: int

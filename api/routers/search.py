# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: search router
# -----------------------------------------------------------------------------
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_search_service, get_tenant
from api.schemas.search import (
    FindSimilarRequest,
    SearchAllRequest,
    SearchHit,
    SearchResponse,
    SemanticSearchRequest,
)
from errors.SearchErrors import SearchServiceError
from services.SearchService import SearchService
from similarity.SearchResult import SearchResult
from tenancy.TenantGuard import TenantContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


def _to_response(results: List[SearchResult]) -> SearchResponse:
    hits = [SearchHit(**r.to_dict()) for r in results]
    return SearchResponse(results=hits, count=len(hits))


@router.post("", response_model=SearchResponse)
def post_semantic_search(
    req: SemanticSearchRequest,
    tenant: TenantContext = Depends(get_tenant),
    svc: SearchService = Depends(get_search_service),
) -> SearchResponse:
    query_text = req.query.strip()
    if not query_text:
        raise HTTPException(status_code=400, detail="query must not be empty")

    try:
        results = svc.semantic_search(tenant, query_text, req.collection, req.limit)
    except SearchServiceError:
        raise
    except Exception as e:
        logger.exception("Semantic search failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Search failed: {e}")

    return _to_response(results)


@router.post("/all", response_model=SearchResponse)
def post_search_all(
    req: SearchAllRequest,
    tenant: TenantContext = Depends(get_tenant),
    svc: SearchService = Depends(get_search_service),
) -> SearchResponse:
    query_text = req.query.strip()
    if not query_text:
        raise HTTPException(status_code=400, detail="query must not be empty")

    try:
        results = svc.search_all(tenant, query_text, req.collections, req.limit)
    except SearchServiceError:
        raise
    except Exception as e:
        logger.exception("Search across collections failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Search failed: {e}")

    return _to_response(results)


@router.post("/similar", response_model=SearchResponse)
def post_find_similar(
    req: FindSimilarRequest,
    tenant: TenantContext = Depends(get_tenant),
    svc: SearchService = Depends(get_search_service),
) -> SearchResponse:
    try:
        results = svc.find_similar(tenant, req.collection, req.docId, req.limit)
    except SearchServiceError:
        raise
    except Exception as e:
        logger.exception("Find similar failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Find similar failed: {e}")

    return _to_response(results)

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: indexing router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_indexing_service, get_tenant, get_validation_service
from api.schemas.indexing import (
    BatchIndexRequest,
    IndexEntityRequest,
    IndexEntityResponse,
    IndexingStatusResponse,
    JobRequest,
    JobResponse,
    ValidationResponse,
)
from errors.SearchErrors import SearchServiceError
from services.IndexValidationService import IndexValidationService
from services.IndexingService import IndexingService
from tenancy.TenantGuard import TenantContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/indexing", tags=["indexing"])


@router.post("/entity", response_model=IndexEntityResponse)
def post_index_entity(
    req: IndexEntityRequest,
    tenant: TenantContext = Depends(get_tenant),
    svc: IndexingService = Depends(get_indexing_service),
) -> IndexEntityResponse:
    try:
        indexed = svc.index_entity(tenant, req.collection, req.docId, req.text, req.metadata)
    except SearchServiceError:
        raise
    except Exception as e:
        logger.exception("Indexing %s/%s failed: %s", req.collection, req.docId, e)
        raise HTTPException(status_code=500, detail=f"Indexing failed: {e}")

    return IndexEntityResponse(success=True, indexed=indexed)


@router.post("/batch", response_model=JobResponse)
def post_batch_index(
    req: BatchIndexRequest,
    tenant: TenantContext = Depends(get_tenant),
    svc: IndexingService = Depends(get_indexing_service),
) -> JobResponse:
    logger.info("POST /indexing/batch collection=%s dry_run=%s", req.collection, req.dryRun)
    try:
        job = svc.batch_index_collection(
            tenant,
            req.collection,
            batch_size=req.batchSize,
            rate_limit=req.rateLimit,
            dry_run=req.dryRun,
        )
    except SearchServiceError:
        raise
    except Exception as e:
        logger.exception("Batch indexing of '%s' failed: %s", req.collection, e)
        raise HTTPException(status_code=500, detail=f"Batch indexing failed: {e}")

    return JobResponse(**job.to_dict())


@router.get("/status", response_model=IndexingStatusResponse)
def get_indexing_status(
    collection: str = Query(..., min_length=1),
    tenant: TenantContext = Depends(get_tenant),
    svc: IndexingService = Depends(get_indexing_service),
) -> IndexingStatusResponse:
    job = svc.get_indexing_status(tenant, collection)
    return IndexingStatusResponse(job=JobResponse(**job.to_dict()) if job else None)


@router.post("/resume", response_model=JobResponse)
def post_resume_indexing(
    req: JobRequest,
    tenant: TenantContext = Depends(get_tenant),
    svc: IndexingService = Depends(get_indexing_service),
) -> JobResponse:
    logger.info("POST /indexing/resume job=%s", req.jobId)
    try:
        job = svc.resume_indexing(tenant, req.jobId)
    except SearchServiceError:
        raise
    except Exception as e:
        logger.exception("Resuming job %s failed: %s", req.jobId, e)
        raise HTTPException(status_code=500, detail=f"Resume failed: {e}")

    return JobResponse(**job.to_dict())


@router.post("/pause", response_model=JobResponse)
def post_pause_indexing(
    req: JobRequest,
    tenant: TenantContext = Depends(get_tenant),
    svc: IndexingService = Depends(get_indexing_service),
) -> JobResponse:
    logger.info("POST /indexing/pause job=%s", req.jobId)
    job = svc.pause_indexing(tenant, req.jobId)
    return JobResponse(**job.to_dict())


@router.get("/validate", response_model=ValidationResponse)
def get_validate_indexing(
    collection: str = Query(..., min_length=1),
    tenant: TenantContext = Depends(get_tenant),
    svc: IndexValidationService = Depends(get_validation_service),
) -> ValidationResponse:
    report = svc.validate_indexing(tenant, collection)
    return ValidationResponse(**report.to_dict())

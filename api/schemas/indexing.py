# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: indexing.py
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class IndexEntityRequest(BaseModel):
    collection: str = Field(..., min_length=1)
    docId: str = Field(..., min_length=1)
    text: str = ""
    metadata: Optional[Dict[str, Any]] = None


class IndexEntityResponse(BaseModel):
    success: bool
    indexed: bool


class BatchIndexRequest(BaseModel):
    collection: str = Field(..., min_length=1)
    batchSize: Optional[int] = Field(None, ge=1)
    rateLimit: Optional[float] = Field(None, gt=0)
    dryRun: bool = False


class JobRequest(BaseModel):
    jobId: str = Field(..., min_length=1)


class JobErrorModel(BaseModel):
    docId: str
    error: str


class CheckpointModel(BaseModel):
    lastDocId: str
    lastIndexedAt: str


class JobResponse(BaseModel):
    jobId: str
    collection: str
    organizationId: str
    status: str
    totalDocuments: int
    indexedDocuments: int
    failedDocuments: int
    skippedDocuments: int
    startedAt: str
    completedAt: Optional[str] = None
    errors: List[JobErrorModel] = []
    checkpoint: Optional[CheckpointModel] = None
    createdBy: str
    userOrgId: str
    embeddingModel: Optional[str] = None
    dryRun: bool = False


class IndexingStatusResponse(BaseModel):
    job: Optional[JobResponse] = None


class ValidationResponse(BaseModel):
    collection: str
    organizationId: str
    totalDocuments: int
    indexedDocuments: int
    missingEmbeddings: int
    invalidEmbeddings: int
    missingText: int
    valid: bool
    errors: List[str]

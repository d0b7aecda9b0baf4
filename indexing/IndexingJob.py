# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-01
# Description: IndexingJob
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class JobStatus(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"


# Allowed transitions; completed is terminal, failed only leaves via resume
TRANSITIONS = {
    JobStatus.RUNNING: {JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.PAUSED},
    JobStatus.PAUSED: {JobStatus.RUNNING},
    JobStatus.FAILED: {JobStatus.RUNNING},
    JobStatus.COMPLETED: set(),
}

RESUMABLE = {JobStatus.PAUSED, JobStatus.FAILED}


@dataclass
class JobError:
    doc_id: str
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"docId": self.doc_id, "error": self.error}


@dataclass
class Checkpoint:
    last_doc_id: str
    last_indexed_at: str

    def to_dict(self) -> Dict[str, str]:
        return {"lastDocId": self.last_doc_id, "lastIndexedAt": self.last_indexed_at}


@dataclass
class IndexingJob:
    """
    One (resumable) batch indexing run over a collection for one organization.

    ``organization_id`` is fixed at creation and scopes every document the
    job reads or writes. Persisted with camelCase keys (see ``to_dict``).
    """
    job_id: str
    collection: str
    organization_id: str
    status: JobStatus
    started_at: str
    created_by: str
    user_org_id: str
    total_documents: int = 0
    indexed_documents: int = 0
    failed_documents: int = 0
    skipped_documents: int = 0
    completed_at: Optional[str] = None
    errors: List[JobError] = field(default_factory=list)
    checkpoint: Optional[Checkpoint] = None
    embedding_model: Optional[str] = None
    dry_run: bool = False

    @property
    def processed_documents(self) -> int:
        return self.indexed_documents + self.failed_documents + self.skipped_documents

    def transition(self, new_status: JobStatus) -> None:
        if new_status not in TRANSITIONS[self.status]:
            raise ValueError(f"Illegal job transition {self.status.value} -> {new_status.value}")
        self.status = new_status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobId": self.job_id,
            "collection": self.collection,
            "organizationId": self.organization_id,
            "status": self.status.value,
            "totalDocuments": self.total_documents,
            "indexedDocuments": self.indexed_documents,
            "failedDocuments": self.failed_documents,
            "skippedDocuments": self.skipped_documents,
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
            "errors": [e.to_dict() for e in self.errors],
            "checkpoint": self.checkpoint.to_dict() if self.checkpoint else None,
            "createdBy": self.created_by,
            "userOrgId": self.user_org_id,
            "embeddingModel": self.embedding_model,
            "dryRun": self.dry_run,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "IndexingJob":
        cp = data.get("checkpoint")
        return IndexingJob(
            job_id=data["jobId"],
            collection=data["collection"],
            organization_id=data["organizationId"],
            status=JobStatus(data.get("status", JobStatus.RUNNING.value)),
            started_at=data.get("startedAt") or "",
            created_by=data.get("createdBy") or "system",
            user_org_id=data.get("userOrgId") or data["organizationId"],
            total_documents=int(data.get("totalDocuments") or 0),
            indexed_documents=int(data.get("indexedDocuments") or 0),
            failed_documents=int(data.get("failedDocuments") or 0),
            skipped_documents=int(data.get("skippedDocuments") or 0),
            completed_at=data.get("completedAt"),
            errors=[JobError(doc_id=e.get("docId", ""), error=e.get("error", "")) for e in data.get("errors") or []],
            checkpoint=Checkpoint(cp["lastDocId"], cp.get("lastIndexedAt", "")) if cp else None,
            embedding_model=data.get("embeddingModel"),
            dry_run=bool(data.get("dryRun", False)),
        )

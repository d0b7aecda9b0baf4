# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-21
# Updated: 2026-02-05
# Description: IndexingService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from errors.SearchErrors import FailedPrecondition, InvalidArgument, NotFound, PermissionDenied
from indexing.EntityIndexer import EntityIndexer, utc_now_iso
from indexing.IndexingJob import Checkpoint, IndexingJob, JobError, JobStatus, RESUMABLE
from indexing.TextExtraction import extract_searchable_text
from store.DocumentStore import DocumentStore, StoredDocument
from store.filters import Eq
from tenancy.TenantGuard import TenantContext, TenantGuard
from utility.logging_utils import get_class_logger

EMBEDDING_VERSION = "1.0"
SYSTEM_ERROR_DOC_ID = "system"


@dataclass
class _ActiveRun:
    job_id: str
    pause_requested: threading.Event


class IndexingService:
    """
    Owns single-entity indexing and the batch indexing job lifecycle:

      - index_entity:           tenant-checked single record (re)index
      - batch_index_collection: snapshot a collection for one organization and
                                index it in chunks, paced for the provider
      - get_indexing_status:    most recent job for (collection, organization)
      - resume_indexing:        continue a paused / failed job after its checkpoint
      - pause_indexing:         cooperative stop at the next document boundary

    Documents are processed one at a time. A per-document failure is recorded on
    the job and the run continues; only control-plane failures (snapshot fetch,
    job persistence) fail the job. At most one run per (collection,
    organization) is active in this process.
    """

    def __init__(
        self,
        *,
        store: DocumentStore,
        indexer: EntityIndexer,
        guard: TenantGuard,
        job_collection: str = "indexingJobs",
        batch_size: int = 50,
        rate_limit: float = 10.0,
        persist_every: int = 10,
        max_errors: int = 100,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], str] = utc_now_iso,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.indexer = indexer
        self.guard = guard
        self.job_collection = job_collection
        self.batch_size = batch_size
        self.rate_limit = rate_limit
        self.persist_every = max(1, persist_every)
        self.max_errors = max_errors
        self.sleep = sleep
        self.clock = clock
        self.logger = logger or get_class_logger(self.__class__)

        self._active: Dict[Tuple[str, str], _ActiveRun] = {}
        self._active_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Single entity
    # ------------------------------------------------------------------
    def index_entity(
        self,
        tenant: TenantContext,
        collection: str,
        doc_id: str,
        text: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        collection = (collection or "").strip()
        doc_id = (doc_id or "").strip()
        if not collection or not doc_id:
            raise InvalidArgument("collection and docId are required")

        doc = self.store.get(collection, doc_id)
        if doc is None:
            raise NotFound(f"Document {doc_id} not found in {collection}")
        self.guard.ensure_owns(doc.data, tenant.organization_id)

        # the caller's organization always wins over anything in metadata
        fields = {**(metadata or {}), "organizationId": tenant.organization_id}
        return self.indexer.index_entity(collection, doc_id, text, fields)

    # ------------------------------------------------------------------
    # Job persistence / locking
    # ------------------------------------------------------------------
    def _save_job(self, job: IndexingJob) -> None:
        self.store.set(self.job_collection, job.job_id, job.to_dict())

    def _load_job(self, job_id: str) -> IndexingJob:
        job_id = (job_id or "").strip()
        if not job_id:
            raise InvalidArgument("jobId is required")
        doc = self.store.get(self.job_collection, job_id)
        if doc is None:
            raise NotFound(f"Job {job_id} not found")
        return IndexingJob.from_dict(doc.data)

    def _acquire(self, collection: str, organization_id: str, job_id: str) -> _ActiveRun:
        key = (collection, organization_id)
        with self._active_lock:
            current = self._active.get(key)
            if current is not None:
                raise FailedPrecondition(
                    f"An indexing job ({current.job_id}) is already running for '{collection}'"
                )
            run = _ActiveRun(job_id=job_id, pause_requested=threading.Event())
            self._active[key] = run
            return run

    def _release(self, collection: str, organization_id: str) -> None:
        with self._active_lock:
            self._active.pop((collection, organization_id), None)

    @staticmethod
    def _new_job_id(collection: str, organization_id: str) -> str:
        # the suffix keeps two jobs started in the same millisecond apart
        return f"index_{collection}_{organization_id}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"

    def _check_options(self, batch_size: Optional[int], rate_limit: Optional[float]) -> Tuple[int, float]:
        batch_size = self.batch_size if batch_size is None else batch_size
        rate_limit = self.rate_limit if rate_limit is None else rate_limit
        if not isinstance(batch_size, int) or batch_size < 1:
            raise InvalidArgument("batchSize must be a positive integer")
        if rate_limit <= 0:
            raise InvalidArgument("rateLimit must be positive")
        return batch_size, float(rate_limit)

    # ------------------------------------------------------------------
    # Batch indexing
    # ------------------------------------------------------------------
    def batch_index_collection(
        self,
        tenant: TenantContext,
        collection: str,
        *,
        batch_size: Optional[int] = None,
        rate_limit: Optional[float] = None,
        dry_run: bool = False,
    ) -> IndexingJob:
        collection = (collection or "").strip()
        if not collection:
            raise InvalidArgument("collection is required")
        batch_size, rate_limit = self._check_options(batch_size, rate_limit)

        org_id = tenant.organization_id
        job = IndexingJob(
            job_id=self._new_job_id(collection, org_id),
            collection=collection,
            organization_id=org_id,
            status=JobStatus.RUNNING,
            started_at=self.clock(),
            created_by=tenant.user_id or "system",
            user_org_id=org_id,
            embedding_model=getattr(self.indexer.embedder, "model_name", None),
            dry_run=dry_run,
        )

        run = self._acquire(collection, org_id, job.job_id)
        try:
            self.logger.info(
                "Starting indexing job %s (collection='%s', org='%s', batch=%d, rate=%.2f/s, dry_run=%s)",
                job.job_id, collection, org_id, batch_size, rate_limit, dry_run,
            )
            return self._run(job, run, batch_size=batch_size, rate_limit=rate_limit, resume=False)
        finally:
            self._release(collection, org_id)

    def resume_indexing(
        self,
        tenant: TenantContext,
        job_id: str,
        *,
        batch_size: Optional[int] = None,
        rate_limit: Optional[float] = None,
    ) -> IndexingJob:
        job = self._load_job(job_id)
        self.guard.ensure_owns({"organizationId": job.organization_id}, tenant.organization_id, what="Job")

        if job.status not in RESUMABLE:
            raise FailedPrecondition(f"Cannot resume job with status: {job.status.value}")
        batch_size, rate_limit = self._check_options(batch_size, rate_limit)

        run = self._acquire(job.collection, job.organization_id, job.job_id)
        try:
            job.transition(JobStatus.RUNNING)
            job.completed_at = None
            self.logger.info(
                "Resuming indexing job %s from checkpoint %s",
                job.job_id,
                job.checkpoint.last_doc_id if job.checkpoint else "<start>",
            )
            return self._run(job, run, batch_size=batch_size, rate_limit=rate_limit, resume=True)
        finally:
            self._release(job.collection, job.organization_id)

    def pause_indexing(self, tenant: TenantContext, job_id: str) -> IndexingJob:
        """
        Request a pause. A run active in this process stops at its next
        document boundary; a stale ``running`` record with no live run here
        (e.g. after a crash) is marked paused directly so it can be resumed.
        """
        job = self._load_job(job_id)
        self.guard.ensure_owns({"organizationId": job.organization_id}, tenant.organization_id, what="Job")

        with self._active_lock:
            run = self._active.get((job.collection, job.organization_id))
            if run is not None and run.job_id == job.job_id:
                run.pause_requested.set()
                self.logger.info("Pause requested for running job %s", job.job_id)
                return job

            # A run finishing since the first read has already saved its final
            # state and released the key, so the record read here is current.
            job = self._load_job(job_id)
            if job.status != JobStatus.RUNNING:
                raise FailedPrecondition(f"Cannot pause job with status: {job.status.value}")
            job.transition(JobStatus.PAUSED)
            self._save_job(job)

        self.logger.warning("Job %s had no live run in this process; marked paused", job.job_id)
        return job

    def get_indexing_status(self, tenant: TenantContext, collection: str) -> Optional[IndexingJob]:
        collection = (collection or "").strip()
        if not collection:
            raise InvalidArgument("collection is required")

        docs = self.store.query(
            self.job_collection,
            [Eq("collection", collection), Eq("organizationId", tenant.organization_id)],
        )
        if not docs:
            return None
        latest = max(docs, key=lambda d: (d.data.get("startedAt") or "", d.id))
        return IndexingJob.from_dict(latest.data)

    # ------------------------------------------------------------------
    # Job loop
    # ------------------------------------------------------------------
    def _run(
        self,
        job: IndexingJob,
        run: _ActiveRun,
        *,
        batch_size: int,
        rate_limit: float,
        resume: bool,
    ) -> IndexingJob:
        delay_seconds = batch_size / rate_limit  # (1000 / rateLimit) * batchSize ms
        try:
            self._save_job(job)

            # Snapshot: documents created after this query are not part of the job
            docs = self.store.query(job.collection, [Eq("organizationId", job.organization_id)])
            job.total_documents = len(docs)

            pending = self._resume_pending(job, docs) if resume else docs

            processed = 0
            for start in range(0, len(pending), batch_size):
                for doc in pending[start:start + batch_size]:
                    if run.pause_requested.is_set():
                        job.transition(JobStatus.PAUSED)
                        self._save_job(job)
                        self.logger.info("Job %s paused after %d documents", job.job_id, processed)
                        return job

                    self._process_document(job, doc)
                    job.checkpoint = Checkpoint(last_doc_id=doc.id, last_indexed_at=self.clock())
                    processed += 1
                    if processed % self.persist_every == 0:
                        self._save_job(job)

                more_chunks = start + batch_size < len(pending)
                if more_chunks and not job.dry_run:
                    self.logger.debug("Job %s: pacing %.2fs before next chunk", job.job_id, delay_seconds)
                    self.sleep(delay_seconds)

            job.transition(JobStatus.COMPLETED)
            job.completed_at = self.clock()
            self._save_job(job)
            self.logger.info(
                "Job %s completed: total=%d indexed=%d failed=%d skipped=%d",
                job.job_id,
                job.total_documents,
                job.indexed_documents,
                job.failed_documents,
                job.skipped_documents,
            )
            return job

        except Exception as e:
            job.status = JobStatus.FAILED
            job.completed_at = self.clock()
            job.errors.append(JobError(doc_id=SYSTEM_ERROR_DOC_ID, error=str(e) or e.__class__.__name__))
            self.logger.error("Job %s failed: %s", job.job_id, e, exc_info=True)
            try:
                self._save_job(job)
            except Exception as save_error:
                self.logger.error("Job %s: could not persist failed state: %s", job.job_id, save_error)
            raise

    def _resume_pending(self, job: IndexingJob, docs: List[StoredDocument]) -> List[StoredDocument]:
        """
        Recount a resumed job against the fresh snapshot and return what is
        left to process.

        Records up to the checkpoint that already carry an embedding count as
        indexed without another provider call. Every other record is walked
        again: ids after the checkpoint, records inserted with ids before it,
        and earlier failures or skips. Deleted records drop out of the counts,
        so indexed + failed + skipped ends equal to the snapshot size.
        """
        job.indexed_documents = 0
        job.failed_documents = 0
        job.skipped_documents = 0
        job.errors = [e for e in job.errors if e.doc_id == SYSTEM_ERROR_DOC_ID]

        last = job.checkpoint.last_doc_id if job.checkpoint is not None else None
        pending: List[StoredDocument] = []
        for doc in docs:
            if last is not None and not job.dry_run and doc.id <= last and doc.data.get("embedding"):
                job.indexed_documents += 1
            else:
                pending.append(doc)

        self.logger.info(
            "Job %s: %d documents already indexed up to checkpoint '%s', %d to process",
            job.job_id, job.indexed_documents, last or "<start>", len(pending),
        )
        return pending

    def _process_document(self, job: IndexingJob, doc: StoredDocument) -> None:
        try:
            text = extract_searchable_text(job.collection, doc.data)
            if not text:
                job.skipped_documents += 1
                self.logger.debug("Skipping %s - no searchable text", doc.id)
                return

            if doc.data.get("organizationId") != job.organization_id:
                raise PermissionDenied(f"Document {doc.id} does not belong to organization {job.organization_id}")

            if not job.dry_run:
                self.indexer.index_entity(
                    job.collection,
                    doc.id,
                    text,
                    {"organizationId": job.organization_id, "embeddingVersion": EMBEDDING_VERSION},
                )
            job.indexed_documents += 1

        except Exception as e:
            job.failed_documents += 1
            if len(job.errors) < self.max_errors:
                job.errors.append(JobError(doc_id=doc.id, error=str(e) or e.__class__.__name__))
            self.logger.error("Error indexing %s/%s: %s", job.collection, doc.id, e)


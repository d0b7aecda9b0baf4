# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: IndexValidationService.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from errors.SearchErrors import InvalidArgument
from store.DocumentStore import DocumentStore
from store.filters import Eq
from tenancy.TenantGuard import TenantContext
from utility.logging_utils import get_class_logger

MAX_REPORTED_ERRORS = 10


@dataclass
class ValidationReport:
    collection: str
    organization_id: str
    total_documents: int = 0
    indexed_documents: int = 0
    missing_embeddings: int = 0
    invalid_embeddings: int = 0
    missing_text: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.missing_embeddings == 0 and self.invalid_embeddings == 0 and self.missing_text == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collection": self.collection,
            "organizationId": self.organization_id,
            "totalDocuments": self.total_documents,
            "indexedDocuments": self.indexed_documents,
            "missingEmbeddings": self.missing_embeddings,
            "invalidEmbeddings": self.invalid_embeddings,
            "missingText": self.missing_text,
            "valid": self.is_valid,
            "errors": list(self.errors),
        }


class IndexValidationService:
    """
    Read-only audit of one collection's embeddings for the caller's
    organization. A record counts as indexed when it carries a non-empty
    numeric ``embedding`` of the expected dimension plus its ``embeddingText``.
    """

    def __init__(
        self,
        *,
        store: DocumentStore,
        expected_dimensions: Optional[int] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.expected_dimensions = expected_dimensions
        self.logger = logger or get_class_logger(self.__class__)

    def _note(self, report: ValidationReport, message: str) -> None:
        if len(report.errors) < MAX_REPORTED_ERRORS:
            report.errors.append(message)

    def _embedding_problem(self, embedding: Any) -> Optional[str]:
        if not isinstance(embedding, list) or not embedding:
            return "embedding is not a non-empty list"
        if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in embedding):
            return "embedding contains non-numeric values"
        if self.expected_dimensions and len(embedding) != self.expected_dimensions:
            return f"embedding has dimension {len(embedding)}, expected {self.expected_dimensions}"
        return None

    def validate_indexing(self, tenant: TenantContext, collection: str) -> ValidationReport:
        collection = (collection or "").strip()
        if not collection:
            raise InvalidArgument("collection is required")

        org_id = tenant.organization_id
        docs = self.store.query(collection, [Eq("organizationId", org_id)])
        report = ValidationReport(collection=collection, organization_id=org_id, total_documents=len(docs))

        for doc in docs:
            embedding = doc.data.get("embedding")
            if embedding is None:
                report.missing_embeddings += 1
                self._note(report, f"{doc.id}: missing embedding")
                continue

            problem = self._embedding_problem(embedding)
            if problem:
                report.invalid_embeddings += 1
                self._note(report, f"{doc.id}: {problem}")
                continue

            if not (doc.data.get("embeddingText") or "").strip():
                report.missing_text += 1
                self._note(report, f"{doc.id}: missing embeddingText")
                continue

            report.indexed_documents += 1

        log = self.logger.info if report.is_valid else self.logger.warning
        log(
            "Validated '%s' for org '%s': total=%d indexed=%d missing=%d invalid=%d missing_text=%d",
            collection,
            org_id,
            report.total_documents,
            report.indexed_documents,
            report.missing_embeddings,
            report.invalid_embeddings,
            report.missing_text,
        )
        return report

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-26
# Description: SearchErrors
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


class SearchServiceError(Exception):
    """
    Base error for the search / indexing services.

    Each subclass carries a stable ``code`` (used in API error bodies and job
    error entries) and the HTTP status the API layer maps it to.
    """

    code: str = "internal"
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "error": self.__class__.__name__,
            "code": self.code,
            "detail": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


class Unauthenticated(SearchServiceError):
    """No valid caller identity."""
    code = "unauthenticated"
    status_code = 401


class PermissionDenied(SearchServiceError):
    """Caller has no organization, or the target record belongs to another one."""
    code = "permission-denied"
    status_code = 403


class InvalidArgument(SearchServiceError):
    code = "invalid-argument"
    status_code = 400


class NotFound(SearchServiceError):
    code = "not-found"
    status_code = 404


class FailedPrecondition(SearchServiceError):
    code = "failed-precondition"
    status_code = 409


class Unavailable(SearchServiceError):
    """Embedding provider transport failure. The caller may retry."""
    code = "unavailable"
    status_code = 503
    retryable = True


class Internal(SearchServiceError):
    code = "internal"
    status_code = 500

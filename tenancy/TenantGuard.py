# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-30
# Description: TenantGuard
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from errors.SearchErrors import PermissionDenied, Unauthenticated
from store.DocumentStore import DocumentStore
from tenancy.IdentityProvider import IdentityProvider
from utility.logging_utils import get_class_logger


@dataclass(frozen=True)
class TenantContext:
    """The authenticated caller and the one organization they act for."""
    user_id: str
    organization_id: str


class TenantGuard:
    """
    Resolves the caller's organization from their verified identity and
    checks record ownership.

    The organization comes from the signed token claim (``org_claim``) or,
    failing that, from ``{users_collection}/{uid}.organizationId``. An
    organization id supplied in a request body is never consulted.
    """

    def __init__(
        self,
        *,
        identity_provider: IdentityProvider,
        store: DocumentStore,
        org_claim: str = "organizationId",
        users_collection: str = "users",
        logger=None,
    ) -> None:
        self.identity_provider = identity_provider
        self.store = store
        self.org_claim = org_claim
        self.users_collection = users_collection
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def _bearer_token(authorization: Optional[str]) -> str:
        if not authorization or not authorization.strip():
            raise Unauthenticated("Missing Authorization header")
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise Unauthenticated("Authorization header must be 'Bearer <token>'")
        return token.strip()

    def resolve(self, authorization: Optional[str]) -> TenantContext:
        token = self._bearer_token(authorization)
        claims = self.identity_provider.verify(token)
        user_id = str(claims.get("sub") or "")
        if not user_id:
            raise Unauthenticated("Token has no subject")

        org_id = claims.get(self.org_claim)
        if not isinstance(org_id, str) or not org_id:
            org_id = self._lookup_user_org(user_id)

        if not org_id:
            self.logger.warning("User '%s' has no associated organization", user_id)
            raise PermissionDenied("User is not associated with an organization")

        return TenantContext(user_id=user_id, organization_id=org_id)

    def _lookup_user_org(self, user_id: str) -> Optional[str]:
        user = self.store.get(self.users_collection, user_id)
        if user is None:
            return None
        org_id = user.data.get("organizationId")
        return org_id if isinstance(org_id, str) and org_id else None

    def ensure_owns(
        self,
        data: Optional[Mapping[str, Any]],
        organization_id: str,
        *,
        what: str = "Document",
    ) -> None:
        owner = (data or {}).get("organizationId")
        if not organization_id or owner != organization_id:
            self.logger.warning(
                "%s ownership check failed (owner=%r, caller_org=%r)", what, owner, organization_id
            )
            raise PermissionDenied(f"{what} does not belong to your organization")

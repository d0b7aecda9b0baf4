# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-03
# Description: dependencies.py
# -----------------------------------------------------------------------------
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from api.AppContainer import AppContainer
from services.HealthService import HealthService
from services.IndexValidationService import IndexValidationService
from services.IndexingService import IndexingService
from services.SearchService import SearchService
from tenancy.TenantGuard import TenantContext, TenantGuard


@lru_cache
def get_container() -> AppContainer:
    # built on first request, not at import
    return AppContainer()

def get_tenant_guard() -> TenantGuard:
    return get_container().guard

def get_tenant(
    authorization: Optional[str] = Header(None),
    guard: TenantGuard = Depends(get_tenant_guard),
) -> TenantContext:
    return guard.resolve(authorization)

def get_search_service() -> SearchService:
    # use the singleton service from the container
    return get_container().search_service

def get_indexing_service() -> IndexingService:
    # use the singleton service from the container
    return get_container().indexing_service

def get_validation_service() -> IndexValidationService:
    return get_container().validation_service

def get_health_service() -> HealthService:
    # use the singleton service from the container
    return get_container().health_service

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-03
# Description: main.py
# -----------------------------------------------------------------------------
import logging

from fastapi import FastAPI

from api.errors import register_exception_handlers
from api.routers import health, indexing, search

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
app = FastAPI(title="Tenant Search API")
register_exception_handlers(app)
app.include_router(health.router)
app.include_router(search.router)
app.include_router(indexing.router)

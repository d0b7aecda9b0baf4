# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: errors.py
# -----------------------------------------------------------------------------
"""
FastAPI exception handlers mapping SearchServiceError subclasses to their HTTP
status with a uniform body:

    {"error": "NotFound", "code": "not-found", "detail": "...", "details": {...}}
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from errors.SearchErrors import Internal, InvalidArgument, SearchServiceError

logger = logging.getLogger(__name__)


async def search_error_handler(request: Request, exc: SearchServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Server error on %s %s: %s (code=%s, status=%d)",
            request.method,
            request.url.path,
            exc.message,
            exc.code,
            exc.status_code,
        )
    else:
        logger.warning(
            "Client error on %s %s: %s (code=%s, status=%d)",
            request.method,
            request.url.path,
            exc.message,
            exc.code,
            exc.status_code,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed request bodies are reported like any other invalid argument
    err = InvalidArgument("Invalid request", details={"errors": jsonable_encoder(exc.errors())})
    logger.warning("Invalid request on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    err = Internal("An unexpected error occurred")
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SearchServiceError, search_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    logger.debug("Registered search service exception handlers")

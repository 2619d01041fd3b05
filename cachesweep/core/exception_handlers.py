"""Exception to HTTP response mapping for the FastAPI app.

Every error body has the shape {"error": CODE, "message": str, "details"?: ...}.
Register with register_exception_handlers(app).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cachesweep.core.config import get_settings
from cachesweep.domain.exceptions import CacheSweepException

logger = logging.getLogger(__name__)

# Domain error_code -> HTTP status; unknown codes are client errors (400).
_STATUS_BY_ERROR_CODE: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    # Cleanup cannot run: database or agent registry unavailable.
    "SERVICE_UNAVAILABLE": 503,
    "REGISTRY_ERROR": 503,
    "CACHE_STORE_ERROR": 503,
    # On-demand run exceeded the cleanup timeout; deleted batches stay deleted.
    "CLEANUP_TIMEOUT": 504,
}


def _error_response(
    status_code: int, error: str, message: Any, details: Any = None
) -> JSONResponse:
    content: dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _on_cache_sweep_error(request: Request, exc: CacheSweepException) -> JSONResponse:
    status_code = _STATUS_BY_ERROR_CODE.get(exc.error_code, 400)
    if status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, "HTTP_ERROR", exc.detail)


def _on_unhandled(request: Request, exc: Exception) -> JSONResponse:
    """500; the exception text is only exposed in debug mode."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return _error_response(500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above on app. Call once after creating it."""
    app.add_exception_handler(CacheSweepException, _on_cache_sweep_error)
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(Exception, _on_unhandled)

# WORKFLOW: Exception handlers mapping catalog errors to HTTP responses.
# Used by: api/main.py at application startup
# Handlers:
# 1. CatalogError - ImportRejected (400), StoreUnavailable / ExportFailed (500)
# 2. Exception - anything unexpected (500)
#
# Error body: {"error": {"message": ..., "type": ...}}

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from core.exceptions import CatalogError

logger = logging.getLogger(__name__)


def setup_error_handlers(app: FastAPI) -> None:
    """
    Register the catalog exception handlers on the app.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
        else:
            logger.warning(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "message": exc.message,
                    "type": exc.__class__.__name__,
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error on {request.url.path}: {exc}", exc_info=True)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "message": "An unexpected error occurred",
                    "type": "InternalServerError",
                }
            },
        )

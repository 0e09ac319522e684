#!/usr/bin/env python3
"""
Price Catalog API - ZIP/CSV catalog import and export.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from core.config import settings
from api.errors import setup_error_handlers
from api.middleware.logging import LoggingMiddleware
from api.routers import health, prices
from db.session import init_db

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.project_name} started, serving {settings.api_prefix}/prices")
    yield


def create_app(bootstrap_schema: bool = True) -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        description="Upload and download price catalogs as zipped CSV files",
        lifespan=lifespan if bootstrap_schema else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.allowed_methods,
        allow_headers=settings.allowed_headers,
    )
    app.add_middleware(LoggingMiddleware)

    setup_error_handlers(app)

    # Expose health checks both at root and versioned paths
    app.include_router(health.router)
    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(prices.router, prefix=settings.api_prefix)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

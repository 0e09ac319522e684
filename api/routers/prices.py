# WORKFLOW: Price catalog upload and download endpoints.
# Used by: Catalog operators, integration tests
# Endpoints:
# 1. POST /prices - Import a ZIP holding one CSV file, return catalog totals
# 2. GET /prices - Download the whole catalog as a ZIP holding data.csv
#
# Request flow: HTTP -> read upload -> pipeline in thread pool -> response
# Pipelines block on the database, so they run off the event loop.

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
import logging

from api.schemas.response import ErrorResponse, PriceImportResponse
from core.config import settings
from core.exceptions import ImportRejected
from db.session import get_db
from services.catalog_store import CatalogStore, SqlCatalogStore
from services.price_export import PriceExportPipeline
from services.price_import import PriceImportPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["prices"])


def get_catalog_store(db: Session = Depends(get_db)) -> CatalogStore:
    return SqlCatalogStore(db)


@router.post(
    "/prices",
    response_model=PriceImportResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_prices(
    file: Optional[UploadFile] = File(None),
    store: CatalogStore = Depends(get_catalog_store),
):
    """
    Import a price catalog.

    The upload is a ZIP archive holding one CSV file with the header row
    ``id,name,category,price,create_date``. Invalid rows are skipped; the
    response totals cover the whole catalog after the import.
    """
    logger.info("Received POST request to /prices")

    if file is None:
        raise ImportRejected("Failed to read file: form field 'file' is required")

    try:
        payload = await file.read(settings.max_upload_mb * 1024 * 1024 + 1)
    finally:
        await file.close()

    if not payload:
        raise ImportRejected("Uploaded file is empty")
    if len(payload) > settings.max_upload_mb * 1024 * 1024:
        raise ImportRejected(f"Uploaded file exceeds {settings.max_upload_mb} MB")

    pipeline = PriceImportPipeline(
        store,
        suffix=settings.tabular_suffix,
        require_text=settings.require_text_fields,
    )
    summary = await run_in_threadpool(pipeline.run, payload)
    return PriceImportResponse.from_summary(summary)


@router.get(
    "/prices",
    response_class=Response,
    responses={
        200: {"content": {"application/zip": {}}},
        500: {"model": ErrorResponse},
    },
)
async def download_prices(store: CatalogStore = Depends(get_catalog_store)):
    """
    Download the whole catalog as a ZIP archive holding one CSV file.
    """
    pipeline = PriceExportPipeline(
        store,
        archive_name=settings.export_archive_name,
        entry_name=settings.export_entry_name,
    )
    bundle = await run_in_threadpool(pipeline.run)

    return Response(
        content=bundle.content,
        status_code=status.HTTP_200_OK,
        media_type=bundle.media_type,
        headers={"Content-Disposition": bundle.content_disposition},
    )

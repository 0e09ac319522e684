# WORKFLOW: Export pipeline rendering the whole catalog as a downloadable ZIP.
# Used by: GET /api/v0/prices, bootstrap CLI export command
# Steps:
# 1. fetch_all() from the catalog store
# 2. Encode records as CSV with the export header
# 3. Wrap the CSV as the single entry of a new ZIP
#
# Export flow: store -> ProductRecords -> CSV bytes -> ZIP bytes -> ExportBundle
# No partial export: the full catalog is rendered or ExportFailed is raised.

"""
Export pipeline: persisted catalog to a ZIP download.
"""

import logging

from pydantic import BaseModel

from core.exceptions import ExportFailed, StoreUnavailable
from etl.archive import build_archive
from etl.tabular import encode_records
from services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


class ExportBundle(BaseModel):
    content: bytes
    filename: str
    media_type: str = "application/zip"
    record_count: int = 0

    @property
    def content_disposition(self) -> str:
        return f"attachment; filename={self.filename}"


class PriceExportPipeline:
    """Renders the catalog as a ZIP holding one CSV file."""

    def __init__(self, store: CatalogStore, archive_name: str = "data.zip", entry_name: str = "data.csv"):
        self.store = store
        self.archive_name = archive_name
        self.entry_name = entry_name

    def run(self) -> ExportBundle:
        """
        Export the whole catalog.

        Returns:
            ExportBundle with the archive bytes and download metadata

        Raises:
            ExportFailed: If the store cannot be read or the archive cannot be built
        """
        try:
            records = self.store.fetch_all()
        except StoreUnavailable as e:
            raise ExportFailed(f"Failed to query database: {e.message}") from e

        try:
            payload = encode_records(records)
            content = build_archive(self.entry_name, payload)
        except (ValueError, OSError) as e:
            logger.error(f"Failed to build export archive: {e}")
            raise ExportFailed(f"Failed to build export archive: {e}") from e

        logger.info(f"Exported {len(records)} records as {self.archive_name}")
        return ExportBundle(
            content=content,
            filename=self.archive_name,
            record_count=len(records),
        )

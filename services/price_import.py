# WORKFLOW: Import pipeline for uploaded price catalog archives.
# Used by: POST /api/v0/prices, bootstrap CLI import command
# Steps:
# 1. Extract - ZIP bytes -> CSV text stream
# 2. Decode - CSV text -> raw rows
# 3. Validate & filter - drop the header, classify each row, log rejections
# 4. Persist - insert accepted records one by one
# 5. Summarize - catalog-wide statistics + inserted count
#
# Import flow: upload -> extract -> decode -> validate -> bulk_insert -> aggregate_stats -> ImportSummary
# Fatal errors short-circuit; per-row failures only shrink the accepted set.

"""
Import pipeline: ZIP upload to persisted catalog rows.
"""

import logging
from typing import List, Tuple

from core.exceptions import CorruptArchive, ImportRejected, MalformedTable, NoTabularFileFound
from etl.archive import open_tabular_entry
from etl.records import ImportSummary, ProductRecord, RowRejection
from etl.tabular import parse_rows
from etl.validators import validate_row
from services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


class PriceImportPipeline:
    """Runs one upload through extraction, validation and persistence."""

    def __init__(self, store: CatalogStore, suffix: str = ".csv", require_text: bool = False):
        self.store = store
        self.suffix = suffix
        self.require_text = require_text

    def run(self, payload: bytes) -> ImportSummary:
        """
        Import an uploaded archive.

        Args:
            payload: Raw bytes of the ZIP upload

        Returns:
            ImportSummary with the inserted count and catalog-wide totals

        Raises:
            ImportRejected: If the upload cannot be read or holds no valid rows
            StoreUnavailable: If the store fails during insertion or statistics
        """
        rows = self._read_rows(payload)

        candidates, rejections = self.filter_rows(rows)
        for rejection in rejections:
            logger.warning(f"Skipping {rejection}")

        if not candidates:
            logger.error("No valid data found in CSV")
            raise ImportRejected("no valid rows")

        logger.info(f"Accepted {len(candidates)} rows, rejected {len(rejections)}")

        total_items = self.store.bulk_insert(candidates)
        total_categories, total_price = self.store.aggregate_stats()

        summary = ImportSummary(
            total_items=total_items,
            total_categories=total_categories,
            total_price=total_price,
        )
        logger.info(
            f"Import finished: items={summary.total_items}, "
            f"categories={summary.total_categories}, total_price={summary.total_price}"
        )
        return summary

    def _read_rows(self, payload: bytes) -> List[List[str]]:
        try:
            with open_tabular_entry(payload, self.suffix) as stream:
                return parse_rows(stream)
        except (CorruptArchive, NoTabularFileFound, MalformedTable) as e:
            raise ImportRejected(e.message) from e

    def filter_rows(self, rows: List[List[str]]) -> Tuple[List[ProductRecord], List[RowRejection]]:
        """
        Validate every row after the header, in file order.

        Row positions are 1-based and count the header as row 1.
        """
        candidates = []
        rejections = []
        for position, row in enumerate(rows[1:], start=2):
            result = validate_row(row, position, require_text=self.require_text)
            if isinstance(result, RowRejection):
                rejections.append(result)
            else:
                candidates.append(result)
        return candidates, rejections

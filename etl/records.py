# WORKFLOW: Domain records exchanged between the catalog pipeline stages.
# Used by: Row validator, tabular writer, catalog store, import/export pipelines
# Records include:
# 1. ProductRecord - one priced product, the unit of catalog data
# 2. RowRejection - why a single CSV row was skipped (diagnostic only)
# 3. ImportSummary - totals reported after an import
#
# Record flow: CSV row -> validate_row() -> ProductRecord -> CatalogStore -> ImportSummary

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProductRecord(BaseModel):
    """A fully validated catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    category: str
    price: Decimal
    creation_date: str


class RejectionReason(str, Enum):
    MALFORMED_ROW = "malformed_row"
    INVALID_IDENTIFIER = "invalid_identifier"
    INVALID_PRICE = "invalid_price"
    EMPTY_FIELD = "empty_field"
    STORE_REJECTED = "store_rejected"


class RowRejection(BaseModel):
    """A skipped row. Logged by the pipeline, never returned to the caller."""

    position: int = Field(..., ge=1, description="1-based row number in the file")
    reason: RejectionReason
    detail: str = ""

    def __str__(self) -> str:
        return f"row {self.position}: {self.reason.value} ({self.detail})"


class ImportSummary(BaseModel):
    """Totals after an import. Category and price totals cover the whole catalog."""

    total_items: int = Field(..., ge=0)
    total_categories: int = Field(..., ge=0)
    total_price: Decimal

# WORKFLOW: Pydantic response schemas for the prices API.
# Used by: API response generation, OpenAPI docs, testing
# Schemas include:
# 1. PriceImportResponse - Totals returned after an upload
# 2. ErrorDetail / ErrorResponse - Body of every error response
#
# Response flow: ImportSummary -> PriceImportResponse -> JSON

from pydantic import BaseModel, Field

from etl.records import ImportSummary


class PriceImportResponse(BaseModel):
    total_items: int = Field(..., ge=0, description="Rows inserted by this upload")
    total_categories: int = Field(..., ge=0, description="Distinct categories across the whole catalog")
    total_price: float = Field(..., description="Sum of every price in the catalog")

    @classmethod
    def from_summary(cls, summary: ImportSummary) -> "PriceImportResponse":
        return cls(
            total_items=summary.total_items,
            total_categories=summary.total_categories,
            total_price=float(summary.total_price),
        )


class ErrorDetail(BaseModel):
    message: str
    type: str


class ErrorResponse(BaseModel):
    error: ErrorDetail

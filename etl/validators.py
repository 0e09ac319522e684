# WORKFLOW: Per-row validation of uploaded price catalog rows.
# Used by: Import pipeline, round-trip tests
# Functions:
# 1. parse_identifier() - Parse the product id cell
# 2. parse_price() - Parse the price cell as a finite decimal
# 3. validate_row() - Classify one raw row as a ProductRecord or a RowRejection
#
# Validation flow: raw cells -> cell count -> id -> price -> text policy -> ProductRecord
# Pure functions: no I/O, a rejected row never aborts the batch.

"""
Row validation for price catalog uploads.
"""

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional, Union

from etl.records import ProductRecord, RejectionReason, RowRejection

logger = logging.getLogger(__name__)

EXPECTED_CELLS = 5

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_TWO_PLACES = Decimal("0.01")

# Identifiers must fit a signed 64-bit integer
MIN_IDENTIFIER = -(2 ** 63)
MAX_IDENTIFIER = 2 ** 63 - 1


def parse_identifier(cell: str) -> Optional[int]:
    """
    Parse a product identifier.

    Args:
        cell: Raw cell text

    Returns:
        The integer id, or None if the cell is not an ASCII integer
        within the signed 64-bit range
    """
    text = cell.strip()
    if not _INTEGER_RE.fullmatch(text):
        return None

    value = int(text)
    if not MIN_IDENTIFIER <= value <= MAX_IDENTIFIER:
        return None
    return value


def parse_price(cell: str) -> Optional[Decimal]:
    """
    Parse a price as a finite decimal rounded to two places.

    Args:
        cell: Raw cell text

    Returns:
        The price, or None if the cell is not a finite number or has too
        many digits to hold two fractional places
    """
    try:
        value = Decimal(cell.strip())
        if not value.is_finite():
            return None
        return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def validate_row(
    row: List[str], position: int, require_text: bool = False
) -> Union[ProductRecord, RowRejection]:
    """
    Validate a single CSV row.

    Args:
        row: Raw cells of the row
        position: 1-based row number, used for diagnostics only
        require_text: Reject rows whose name or category is blank

    Returns:
        A ProductRecord when the row is valid, otherwise a RowRejection
    """
    if len(row) != EXPECTED_CELLS:
        return RowRejection(
            position=position,
            reason=RejectionReason.MALFORMED_ROW,
            detail=f"expected {EXPECTED_CELLS} cells, got {len(row)}",
        )

    raw_id, name, category, raw_price, creation_date = row

    product_id = parse_identifier(raw_id)
    if product_id is None:
        return RowRejection(
            position=position,
            reason=RejectionReason.INVALID_IDENTIFIER,
            detail=f"invalid product ID {raw_id!r}",
        )

    price = parse_price(raw_price)
    if price is None:
        return RowRejection(
            position=position,
            reason=RejectionReason.INVALID_PRICE,
            detail=f"invalid price {raw_price!r}",
        )

    if require_text:
        blank = [field for field, value in (("name", name), ("category", category)) if not value.strip()]
        if blank:
            return RowRejection(
                position=position,
                reason=RejectionReason.EMPTY_FIELD,
                detail=f"empty {', '.join(blank)}",
            )

    return ProductRecord(
        id=product_id,
        name=name,
        category=category,
        price=price,
        creation_date=creation_date,
    )

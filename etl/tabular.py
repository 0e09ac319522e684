# WORKFLOW: CSV decoding and encoding for the price catalog.
# Used by: Import pipeline (decode), export pipeline (encode), round-trip tests
# Functions:
# 1. parse_rows() - Tokenize a text stream into rows of cells
# 2. write_records() - Render ProductRecords as CSV text with the export header
# 3. encode_records() - Same as write_records(), UTF-8 encoded
#
# The parser does not know about headers; callers drop the first row themselves.

"""
CSV parsing and writing for price catalog files.
"""

import csv
import io
import logging
from decimal import Decimal
from typing import Iterable, List, TextIO

from core.exceptions import MalformedTable
from etl.records import ProductRecord

logger = logging.getLogger(__name__)

EXPORT_HEADER = ["id", "name", "category", "price", "create_date"]

_TWO_PLACES = Decimal("0.01")


def parse_rows(stream: TextIO) -> List[List[str]]:
    """
    Read every row of a comma separated stream.

    Blank lines are skipped. The header, if any, is returned as the first row.

    Args:
        stream: Text stream positioned at the start of the data

    Returns:
        Rows in file order, each a list of cells

    Raises:
        MalformedTable: On unterminated quotes or text that cannot be decoded
    """
    reader = csv.reader(stream, delimiter=",", strict=True)
    try:
        rows = [row for row in reader if row]
    except csv.Error as e:
        logger.error(f"Failed to parse CSV at line {reader.line_num}: {e}")
        raise MalformedTable(f"Failed to parse CSV file at line {reader.line_num}: {e}") from e
    except UnicodeDecodeError as e:
        logger.error(f"CSV file is not valid UTF-8: {e}")
        raise MalformedTable(f"CSV file is not valid UTF-8: {e.reason}") from e

    logger.info(f"CSV file contains {len(rows)} rows (including header)")
    return rows


def format_price(price: Decimal) -> str:
    """Format a price with exactly two fractional digits."""
    return str(Decimal(price).quantize(_TWO_PLACES))


def write_records(records: Iterable[ProductRecord]) -> str:
    """
    Render records as CSV text.

    Args:
        records: Records to write, in output order

    Returns:
        CSV text starting with the export header
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)

    count = 0
    for record in records:
        writer.writerow([
            record.id,
            record.name,
            record.category,
            format_price(record.price),
            record.creation_date,
        ])
        count += 1

    logger.debug(f"Wrote {count} records to CSV")
    return buffer.getvalue()


def encode_records(records: Iterable[ProductRecord]) -> bytes:
    return write_records(records).encode("utf-8")

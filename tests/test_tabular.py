"""Tests for CSV parsing, writing and the encode/decode round trip."""

import io
from decimal import Decimal

import pytest

from core.exceptions import MalformedTable
from etl.records import ProductRecord
from etl.tabular import encode_records, parse_rows, write_records
from etl.validators import validate_row


RECORDS = [
    ProductRecord(id=1, name="Widget", category="Tools", price=Decimal("9.99"), creation_date="2024-01-01"),
    ProductRecord(id=2, name="Gadget, large", category="Tools", price=Decimal("19.50"), creation_date="2024-01-02"),
    ProductRecord(id=3, name='Say "hi"', category="Toys", price=Decimal("0.00"), creation_date="2024-02-29"),
]


def test_parse_rows_keeps_header_and_skips_blank_lines():
    stream = io.StringIO("id,name\n\n1,Widget\n2,\"Gadget, large\"\n")

    rows = parse_rows(stream)

    assert rows == [["id", "name"], ["1", "Widget"], ["2", "Gadget, large"]]


def test_parse_rows_keeps_ragged_rows():
    rows = parse_rows(io.StringIO("a,b,c\n1,2\n"))

    assert rows == [["a", "b", "c"], ["1", "2"]]


def test_unterminated_quote_is_malformed():
    with pytest.raises(MalformedTable):
        parse_rows(io.StringIO('id,name\n1,"Widget\n'))


def test_undecodable_text_is_malformed():
    stream = io.TextIOWrapper(io.BytesIO(b"id,name\n1,\xff\xfe\n"), encoding="utf-8")

    with pytest.raises(MalformedTable):
        parse_rows(stream)


def test_write_records_uses_fixed_header_and_two_decimals():
    text = write_records(RECORDS[:1] + [
        ProductRecord(id=9, name="Bolt", category="Tools", price=Decimal("5"), creation_date="2024-03-01"),
    ])

    assert text == (
        "id,name,category,price,create_date\n"
        "1,Widget,Tools,9.99,2024-01-01\n"
        "9,Bolt,Tools,5.00,2024-03-01\n"
    )


def test_empty_catalog_writes_header_only():
    assert write_records([]) == "id,name,category,price,create_date\n"


def test_round_trip_reproduces_records():
    payload = encode_records(RECORDS)
    rows = parse_rows(io.StringIO(payload.decode("utf-8")))

    decoded = [validate_row(row, position) for position, row in enumerate(rows[1:], start=2)]

    assert decoded == RECORDS

# WORKFLOW: Database models for the price catalog.
# Used by: Catalog store adapter, schema bootstrap, tests
# Models represent:
# 1. prices - one row per product, keyed by the externally supplied id
#
# Data flow: ZIP upload -> CSV rows -> ProductRecord -> prices table -> CSV export

from datetime import date, datetime

from sqlalchemy import BigInteger, Column, Date, Index, Numeric, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class IsoDate(TypeDecorator):
    """
    Date column that accepts and returns ISO text.

    Date-only text and timestamp text are both accepted on write; values
    that are not dates fail the insert for that row.
    """

    impl = Date
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or isinstance(value, date):
            return value
        text = str(value).strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, datetime):
            value = value.date()
        return value.isoformat()


class Price(Base):
    __tablename__ = "prices"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    product_name = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    creation_date = Column(IsoDate, nullable=False)

    __table_args__ = (
        Index('idx_prices_category', 'category'),
    )

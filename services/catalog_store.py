# WORKFLOW: Catalog store adapter, the boundary between the pipelines and the database.
# Used by: Import pipeline, export pipeline, readiness checks
# Functions:
# 1. bulk_insert() - Insert records one by one, skipping rows the store rejects
# 2. aggregate_stats() - Distinct categories and price total over the whole catalog
# 3. fetch_all() - Every record, ordered by id
# 4. ping() - Connectivity check
#
# Persistence model: every row is its own transaction. A duplicate id or a date
# the column cannot hold skips that row only; connectivity errors abort the call.

"""
Catalog store contract and its SQLAlchemy implementation.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, List, Tuple

from sqlalchemy import distinct, func, insert, select, text
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError, SQLAlchemyError, StatementError
from sqlalchemy.orm import Session

from core.exceptions import StoreUnavailable
from db.models import Price
from etl.records import ProductRecord

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")


class CatalogStore(ABC):
    """Operations the pipelines need from the persistence engine."""

    @abstractmethod
    def bulk_insert(self, records: Iterable[ProductRecord]) -> int:
        """Insert each record independently and return how many were stored."""

    @abstractmethod
    def aggregate_stats(self) -> Tuple[int, Decimal]:
        """Return (distinct category count, price total) over the whole catalog."""

    @abstractmethod
    def fetch_all(self) -> List[ProductRecord]:
        """Return every record ordered by id."""

    def ping(self) -> bool:
        return True


def _is_row_error(error: StatementError) -> bool:
    """Constraint violations and unbindable values only affect their own row."""
    if isinstance(error, (IntegrityError, DataError)):
        return True
    # Raised while binding parameters, before the database saw the statement
    return not isinstance(error, DBAPIError)


class SqlCatalogStore(CatalogStore):
    """Catalog store backed by the ``prices`` table."""

    def __init__(self, session: Session):
        self.session = session

    def bulk_insert(self, records: Iterable[ProductRecord]) -> int:
        inserted = 0
        statement = insert(Price)

        for record in records:
            values = {
                "id": record.id,
                "product_name": record.name,
                "category": record.category,
                "price": record.price,
                "creation_date": record.creation_date,
            }
            try:
                self.session.execute(statement, values)
                self.session.commit()
            except StatementError as e:
                self.session.rollback()
                if not _is_row_error(e):
                    logger.error(f"Database error while inserting product ID {record.id}: {e}")
                    raise StoreUnavailable(f"Failed to insert prices: {e.orig}") from e
                logger.warning(f"Skipping row with Product ID {record.id} due to database error: {e.orig}")
                continue
            except (OverflowError, ValueError) as e:
                # Raised by the driver while binding a value the column type cannot hold
                self.session.rollback()
                logger.warning(f"Skipping row with Product ID {record.id} due to unbindable value: {e}")
                continue
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(f"Database error while inserting product ID {record.id}: {e}")
                raise StoreUnavailable(f"Failed to insert prices: {e}") from e
            inserted += 1

        logger.info(f"Successfully inserted {inserted} items into database")
        return inserted

    def aggregate_stats(self) -> Tuple[int, Decimal]:
        query = select(
            func.count(distinct(Price.category)),
            func.coalesce(func.sum(Price.price), 0),
        )
        try:
            categories, total = self.session.execute(query).one()
        except SQLAlchemyError as e:
            logger.error(f"Failed to calculate statistics: {e}")
            raise StoreUnavailable(f"Failed to calculate statistics: {e}") from e

        total = Decimal(str(total)).quantize(_TWO_PLACES)
        logger.debug(f"Catalog statistics: categories={categories}, total_price={total}")
        return int(categories), total

    def fetch_all(self) -> List[ProductRecord]:
        query = select(Price).order_by(Price.id)
        try:
            rows = self.session.execute(query).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to query database: {e}")
            raise StoreUnavailable(f"Failed to query database: {e}") from e

        logger.info(f"Loaded {len(rows)} products from database")
        return [
            ProductRecord(
                id=row.id,
                name=row.product_name,
                category=row.category,
                price=Decimal(str(row.price)).quantize(_TWO_PLACES),
                creation_date=row.creation_date,
            )
            for row in rows
        ]

    def ping(self) -> bool:
        try:
            self.session.execute(text("SELECT 1")).fetchone()
            return True
        except SQLAlchemyError as e:
            logger.error(f"Catalog store ping failed: {e}")
            return False

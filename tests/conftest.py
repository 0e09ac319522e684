"""
Pytest configuration and shared fixtures.

Database tests run against an in-memory SQLite engine shared across threads,
so requests served through the thread pool see the same catalog.
"""

import io
import zipfile
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db.models import Base
from db.session import get_db
from etl.records import ProductRecord
from services.catalog_store import CatalogStore

SAMPLE_CSV = (
    "id,name,category,price,date\n"
    "1,Widget,Tools,9.99,2024-01-01\n"
    "2,Gadget,Tools,19.5,2024-01-02\n"
)


def make_zip(entries: Dict[str, str]) -> bytes:
    """Build a ZIP archive in memory from a name -> text mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def read_zip(payload: bytes) -> Dict[str, str]:
    with zipfile.ZipFile(io.BytesIO(payload)) as archive:
        return {name: archive.read(name).decode("utf-8") for name in archive.namelist()}


class InMemoryCatalogStore(CatalogStore):
    """Catalog store keeping records in a dict, keyed by id."""

    def __init__(self, records: Iterable[ProductRecord] = ()):
        self.records: Dict[int, ProductRecord] = {record.id: record for record in records}
        self.insert_calls = 0

    def bulk_insert(self, records: Iterable[ProductRecord]) -> int:
        self.insert_calls += 1
        inserted = 0
        for record in records:
            if record.id in self.records:
                continue
            self.records[record.id] = record
            inserted += 1
        return inserted

    def aggregate_stats(self) -> Tuple[int, Decimal]:
        categories = {record.category for record in self.records.values()}
        total = sum((record.price for record in self.records.values()), Decimal("0.00"))
        return len(categories), total

    def fetch_all(self) -> List[ProductRecord]:
        return [self.records[key] for key in sorted(self.records)]


@pytest.fixture
def memory_store():
    return InMemoryCatalogStore()


@pytest.fixture
def sample_zip():
    return make_zip({"data.csv": SAMPLE_CSV})


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    from api.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

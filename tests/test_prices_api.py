"""End-to-end tests for the /api/v0/prices endpoints."""

from api.main import app
from api.routers import health
from api.routers.prices import get_catalog_store
from conftest import SAMPLE_CSV, InMemoryCatalogStore, make_zip, read_zip
from core.exceptions import StoreUnavailable


def upload(client, payload, filename="data.zip"):
    return client.post(
        "/api/v0/prices",
        files={"file": (filename, payload, "application/zip")},
    )


def test_upload_sample_catalog(client, sample_zip):
    response = upload(client, sample_zip)

    assert response.status_code == 200
    assert response.json() == {"total_items": 2, "total_categories": 1, "total_price": 29.49}


def test_download_after_upload(client, sample_zip):
    upload(client, sample_zip)

    response = client.get("/api/v0/prices")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == "attachment; filename=data.zip"
    assert read_zip(response.content) == {
        "data.csv": (
            "id,name,category,price,create_date\n"
            "1,Widget,Tools,9.99,2024-01-01\n"
            "2,Gadget,Tools,19.50,2024-01-02\n"
        )
    }


def test_second_upload_does_not_double_count_categories(client, sample_zip):
    upload(client, sample_zip)
    more = make_zip({"data.csv": "id,name,category,price,date\n3,Hammer,Tools,0.51,2024-01-03\n4,Ball,Toys,10,2024-01-04\n"})

    response = upload(client, more)

    assert response.json() == {"total_items": 2, "total_categories": 2, "total_price": 40.0}


def test_missing_file_field_is_bad_request(client):
    response = client.post("/api/v0/prices", data={"other": "value"})

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "ImportRejected"


def test_archive_without_csv_is_bad_request(client):
    response = upload(client, make_zip({"readme.txt": SAMPLE_CSV}))

    assert response.status_code == 400
    assert read_zip(client.get("/api/v0/prices").content) == {
        "data.csv": "id,name,category,price,create_date\n"
    }


def test_not_a_zip_is_bad_request(client):
    response = upload(client, b"plain text upload")

    assert response.status_code == 400


def test_all_rows_invalid_is_bad_request(client):
    payload = make_zip({"data.csv": "id,name,category,price,date\nx,Widget,Tools,1,2024-01-01\n"})

    response = upload(client, payload)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "no valid rows"


class _UnavailableStore(InMemoryCatalogStore):
    def aggregate_stats(self):
        raise StoreUnavailable("Failed to calculate statistics")

    def fetch_all(self):
        raise StoreUnavailable("Failed to query database")


def test_store_errors_are_server_errors(client, sample_zip):
    app.dependency_overrides[get_catalog_store] = lambda: _UnavailableStore()

    upload_response = upload(client, sample_zip)
    download_response = client.get("/api/v0/prices")

    assert upload_response.status_code == 500
    assert upload_response.json()["error"]["type"] == "StoreUnavailable"
    assert download_response.status_code == 500
    assert download_response.json()["error"]["type"] == "ExportFailed"


def test_health_endpoints(client):
    assert client.get("/healthz").json()["status"] == "healthy"
    assert client.get("/api/v0/livez").json()["status"] == "alive"


def test_oversized_price_skips_only_that_row(client):
    payload = make_zip({"data.csv": (
        "id,name,category,price,date\n"
        "1,Widget,Tools,9.99,2024-01-01\n"
        "2,Big,Tools,1e30,2024-01-02\n"
    )})

    response = upload(client, payload)

    assert response.status_code == 200
    assert response.json() == {"total_items": 1, "total_categories": 1, "total_price": 9.99}


def test_identifier_beyond_64_bits_skips_only_that_row(client):
    payload = make_zip({"data.csv": (
        "id,name,category,price,date\n"
        "1,Widget,Tools,9.99,2024-01-01\n"
        "99999999999999999999,Big,Tools,1.00,2024-01-02\n"
    )})

    response = upload(client, payload)

    assert response.status_code == 200
    assert response.json()["total_items"] == 1


def test_readiness_reports_database_status(client, monkeypatch):
    monkeypatch.setattr(health, "check_db_connection", lambda: True)
    ready = client.get("/readyz")

    monkeypatch.setattr(health, "check_db_connection", lambda: False)
    not_ready = client.get("/api/v0/readyz")

    assert ready.status_code == 200
    assert ready.json()["status"] == "ready"
    assert not_ready.status_code == 503
    assert not_ready.json()["checks"] == {"database": False}

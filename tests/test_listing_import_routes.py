"""
tests/test_listing_import_routes.py

HTTP-level tests for the listing import and duplicate cleanup routers,
served from an in-memory SQLite database.
"""

from __future__ import annotations

import io
from collections.abc import Iterator

import pytest
from fastapi import FastAPI, HTTPException, UploadFile
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import read_upload_bytes
from app.api.routers import duplicate_cleanup_router, listing_import_router
from app.services.listing_import_service import ListingImportService, get_listing_import_service
from db.base import Base
from db.session import get_db

CSV_BODY = (
    "Titulo,Precio,Ubicacion,Habitaciones,URL\n"
    'Piso céntrico,250000,"Eixample, Barcelona",3,https://portal.test/1\n'
    "Ático con terraza,380000,Madrid,4,https://portal.test/2\n"
).encode("utf-8")

JSON_DOCUMENT = {
    "timestamp": "2026-01-15T10:00:00Z",
    "url": "https://www.idealista.com/venta-viviendas/sevilla/",
    "total": 1,
    "particulares": 1,
    "inmobiliarias": 0,
    "viviendas": {
        "todas": [
            {
                "titulo": "Casa en Triana",
                "precio": "310.000€",
                "ubicacion": "Triana, Sevilla",
                "url": "https://portal.test/s1",
                "anunciante": "Particular",
            }
        ]
    },
}


@pytest.fixture()
def client() -> Iterator[TestClient]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    application = FastAPI()
    application.include_router(listing_import_router)
    application.include_router(duplicate_cleanup_router)
    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_listing_import_service] = lambda: ListingImportService(
        log_row_outcomes=False
    )

    with TestClient(application) as test_client:
        yield test_client
    engine.dispose()


def _upload(client: TestClient, body: bytes, *, filename: str = "listings.csv", content_type: str = "text/csv"):
    return client.post(
        "/listings/import/csv",
        files={"file": (filename, body, content_type)},
    )


# ---------------------------------------------------------------------------
# CSV endpoints
# ---------------------------------------------------------------------------


class TestCSVImportEndpoint:
    def test_imports_rows(self, client: TestClient) -> None:
        response = _upload(client, CSV_BODY)

        assert response.status_code == 200
        payload = response.json()
        assert payload["source_format"] == "csv"
        assert payload["summary"] == {
            "total": 2,
            "success_count": 2,
            "duplicate_count": 0,
            "error_count": 0,
        }
        assert payload["rows"][0]["title_snapshot"] == "Piso céntrico"
        assert payload["rows"][0]["entity_id"]

    def test_second_upload_is_all_duplicates(self, client: TestClient) -> None:
        _upload(client, CSV_BODY)

        payload = _upload(client, CSV_BODY).json()

        assert payload["summary"]["duplicate_count"] == 2
        assert payload["rows"][0]["reason"] == "Reference URL already exists"
        assert payload["rows"][0]["field"] == "reference_url"

    def test_missing_column_is_400_with_structured_detail(self, client: TestClient) -> None:
        response = _upload(client, b"Titulo,Ubicacion\nPiso,Madrid\n")

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "missing_required_columns"
        assert detail["details"]["missing"] == ["Precio"]

    def test_non_csv_upload_is_rejected(self, client: TestClient) -> None:
        response = _upload(client, b"%PDF-1.4", filename="listings.pdf", content_type="application/pdf")

        assert response.status_code == 400
        assert response.json()["detail"] == "Only CSV files are allowed."

    def test_validate_csv(self, client: TestClient) -> None:
        response = client.post(
            "/listings/import/csv/validate",
            files={"file": ("listings.csv", CSV_BODY, "text/csv")},
        )

        assert response.status_code == 200
        assert response.json()["valid"] is True
        assert response.json()["listings_count"] == 2

    def test_template_download(self, client: TestClient) -> None:
        response = client.get("/listings/import/csv/template")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.splitlines()[0] == (
            "Titulo,Precio,Ubicacion,Habitaciones,Banos,Superficie,Telefono,Nombre_Contacto,URL"
        )


# ---------------------------------------------------------------------------
# JSON endpoints
# ---------------------------------------------------------------------------


class TestJSONImportEndpoint:
    def test_imports_document_and_echoes_metadata(self, client: TestClient) -> None:
        response = client.post("/listings/import/json", json=JSON_DOCUMENT)

        assert response.status_code == 200
        payload = response.json()
        assert payload["source_format"] == "json"
        assert payload["summary"]["success_count"] == 1
        assert payload["metadata"]["url"] == "https://www.idealista.com/venta-viviendas/sevilla/"

    def test_non_object_document_is_400(self, client: TestClient) -> None:
        response = client.post("/listings/import/json", json=[])

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "invalid_document_structure"

    def test_validate_json(self, client: TestClient) -> None:
        valid = client.post("/listings/import/json/validate", json=JSON_DOCUMENT).json()
        invalid = client.post("/listings/import/json/validate", json={"viviendas": {"todas": []}}).json()

        assert valid["valid"] is True
        assert valid["listings_count"] == 1
        assert invalid["valid"] is False
        assert invalid["reason"] == "The document contains no listings to import."

    def test_non_finite_price_is_a_row_error_not_a_500(self, client: TestClient) -> None:
        body = (
            '{"total": 2, "viviendas": {"todas": ['
            '{"titulo": "Casa en Triana", "precio": 310000, "ubicacion": "Sevilla", "url": "https://portal.test/s1"},'
            '{"titulo": "Piso en Nervión", "precio": NaN, "ubicacion": "Sevilla", "url": "https://portal.test/s2"}'
            "]}}"
        )

        response = client.post(
            "/listings/import/json",
            content=body,
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["summary"]["success_count"] == 1
        assert payload["summary"]["error_count"] == 1
        assert payload["rows"][1]["field"] == "price"
        assert payload["rows"][1]["source_row"]["precio"] == "nan"


# ---------------------------------------------------------------------------
# Stats and duplicate cleanup
# ---------------------------------------------------------------------------


class TestStatsAndCleanup:
    def test_stats_after_imports(self, client: TestClient) -> None:
        _upload(client, CSV_BODY)
        client.post("/listings/import/json", json=JSON_DOCUMENT)

        payload = client.get("/listings/import/stats").json()

        assert payload["total_imported"] == 3
        assert payload["imported_from_json"] == 1

    def test_analyze_and_clean_with_no_duplicates(self, client: TestClient) -> None:
        _upload(client, CSV_BODY)

        analysis = client.get("/listings/duplicates/analyze").json()
        cleanup = client.delete("/listings/duplicates/clean").json()

        assert analysis == {"group_count": 0, "surplus_count": 0, "groups": []}
        assert cleanup == {"deleted_count": 0, "failed_count": 0, "groups": []}


# ---------------------------------------------------------------------------
# Upload size limit
# ---------------------------------------------------------------------------


def test_read_upload_bytes_rejects_oversized_files() -> None:
    upload = UploadFile(file=io.BytesIO(b"x" * 2048), filename="big.csv")

    with pytest.raises(HTTPException) as excinfo:
        read_upload_bytes(upload, max_bytes=1024)

    assert excinfo.value.status_code == 413


def test_read_upload_bytes_returns_payload() -> None:
    upload = UploadFile(file=io.BytesIO(b"Titulo,Precio\n"), filename="small.csv")
    assert read_upload_bytes(upload, max_bytes=1024) == b"Titulo,Precio\n"

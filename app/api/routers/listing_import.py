"""
app/api/routers/listing_import.py

Listing import HTTP endpoints (CSV upload, JSON document, dry runs, stats).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, UploadFile, status
from fastapi.responses import PlainTextResponse

from app.api.dependencies import get_csv_upload, get_listing_repository, read_upload_bytes
from app.parsers.csv_parser import build_template
from app.parsers.errors import ListingStructureError
from app.repositories.property_listing_repository import PropertyListingRepository
from app.schemas.listing_import import (
    ImportStatsResponse,
    ListingImportResponse,
    StructureCheckResponse,
)
from app.services.listing_import_service import ListingImportService, get_listing_import_service

router = APIRouter(prefix="/listings/import", tags=["listing-import"])


@router.post("/csv", response_model=ListingImportResponse)
def import_csv(
    file: UploadFile = Depends(get_csv_upload),
    repository: PropertyListingRepository = Depends(get_listing_repository),
    import_service: ListingImportService = Depends(get_listing_import_service),
) -> ListingImportResponse:
    """
    Import every row of an uploaded CSV export.
    """

    try:
        payload = read_upload_bytes(file)
        result = import_service.import_from_delimited_text(payload, gateway=repository)
    except ListingStructureError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    finally:
        file.file.close()

    return ListingImportResponse.from_result(result)


@router.post("/csv/validate", response_model=StructureCheckResponse)
def validate_csv(
    file: UploadFile = Depends(get_csv_upload),
    import_service: ListingImportService = Depends(get_listing_import_service),
) -> StructureCheckResponse:
    try:
        payload = read_upload_bytes(file)
    finally:
        file.file.close()
    return StructureCheckResponse.from_check(import_service.validate_delimited_text(payload))


@router.get("/csv/template", response_class=PlainTextResponse)
def csv_template() -> PlainTextResponse:
    return PlainTextResponse(
        build_template(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="listing_import_template.csv"'},
    )


@router.post("/json", response_model=ListingImportResponse)
def import_json(
    document: Any = Body(...),
    repository: PropertyListingRepository = Depends(get_listing_repository),
    import_service: ListingImportService = Depends(get_listing_import_service),
) -> ListingImportResponse:
    """
    Import every entry of a `viviendas.todas` JSON document.
    """

    try:
        result = import_service.import_from_structured_document(document, gateway=repository)
    except ListingStructureError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc

    return ListingImportResponse.from_result(result)


@router.post("/json/validate", response_model=StructureCheckResponse)
def validate_json(
    document: Any = Body(...),
    import_service: ListingImportService = Depends(get_listing_import_service),
) -> StructureCheckResponse:
    return StructureCheckResponse.from_check(import_service.validate_structure(document))


@router.get("/stats", response_model=ImportStatsResponse)
def import_stats(
    repository: PropertyListingRepository = Depends(get_listing_repository),
) -> ImportStatsResponse:
    return ImportStatsResponse.from_stats(repository.import_stats())

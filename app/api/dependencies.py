"""
app/api/dependencies.py

Shared FastAPI dependencies for uploads and repository wiring.
"""

from __future__ import annotations

from fastapi import Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.config import get_listing_import_settings
from app.repositories.property_listing_repository import PropertyListingRepository
from app.services.duplicate_cleanup_service import DuplicateCleanupService
from db.session import get_db

CSV_CONTENT_TYPES = {
    "text/csv",
    "text/plain",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()

    if not filename.endswith(".csv") and content_type not in CSV_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def read_upload_bytes(file: UploadFile, *, max_bytes: int | None = None) -> bytes:
    """
    Read an upload fully, rejecting files above the configured size limit.
    """

    limit = max_bytes if max_bytes is not None else get_listing_import_settings().max_upload_bytes
    payload = file.file.read(limit + 1)
    if len(payload) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Uploaded file exceeds the {limit} byte limit.",
        )
    return payload


def get_listing_repository(db: Session = Depends(get_db)) -> PropertyListingRepository:
    return PropertyListingRepository(db)


def get_duplicate_cleanup_service(
    repository: PropertyListingRepository = Depends(get_listing_repository),
) -> DuplicateCleanupService:
    return DuplicateCleanupService(repository)

"""
app/api/routers/duplicate_cleanup.py

Endpoints to inspect and remove stored duplicate listings.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_duplicate_cleanup_service
from app.schemas.listing_import import DuplicateAnalysisResponse, DuplicateCleanupResponse
from app.services.duplicate_cleanup_service import DuplicateCleanupService

router = APIRouter(prefix="/listings/duplicates", tags=["duplicate-cleanup"])


@router.get("/analyze", response_model=DuplicateAnalysisResponse)
def analyze_duplicates(
    cleanup_service: DuplicateCleanupService = Depends(get_duplicate_cleanup_service),
) -> DuplicateAnalysisResponse:
    return DuplicateAnalysisResponse.from_analysis(cleanup_service.analyze())


@router.delete("/clean", response_model=DuplicateCleanupResponse)
def clean_duplicates(
    cleanup_service: DuplicateCleanupService = Depends(get_duplicate_cleanup_service),
) -> DuplicateCleanupResponse:
    """
    Keep the oldest pending listing of each title + price group; delete the rest.
    """

    return DuplicateCleanupResponse.from_result(cleanup_service.clean())

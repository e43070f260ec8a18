"""
app/schemas package marker.
"""

from app.schemas.listing_import import (
    DuplicateAnalysisResponse,
    DuplicateCleanupResponse,
    ImportStatsResponse,
    ListingImportResponse,
    StructureCheckResponse,
)

__all__ = [
    "DuplicateAnalysisResponse",
    "DuplicateCleanupResponse",
    "ImportStatsResponse",
    "ListingImportResponse",
    "StructureCheckResponse",
]

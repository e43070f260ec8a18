"""
app/services package marker.
"""

from app.services.duplicate_cleanup_service import DuplicateCleanupService
from app.services.duplicate_detector import BatchIndex, DuplicateDetector
from app.services.listing_import_service import (
    ListingImportService,
    get_listing_import_service,
)

__all__ = [
    "BatchIndex",
    "DuplicateCleanupService",
    "DuplicateDetector",
    "ListingImportService",
    "get_listing_import_service",
]

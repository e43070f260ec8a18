"""
app/domain package marker.
"""

from app.domain.duplicate_cleanup import DuplicateAnalysis, DuplicateCleanupResult, DuplicateGroup
from app.domain.listing_import import (
    CanonicalListingCandidate,
    ImportRowResult,
    ImportStats,
    ImportSummary,
    ListingGateway,
    ListingImportResult,
    ListingPersistenceError,
)

__all__ = [
    "CanonicalListingCandidate",
    "DuplicateAnalysis",
    "DuplicateCleanupResult",
    "DuplicateGroup",
    "ImportRowResult",
    "ImportStats",
    "ImportSummary",
    "ListingGateway",
    "ListingImportResult",
    "ListingPersistenceError",
]

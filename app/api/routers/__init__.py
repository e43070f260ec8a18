"""
app/api/routers package marker.
"""

from app.api.routers.duplicate_cleanup import router as duplicate_cleanup_router
from app.api.routers.listing_import import router as listing_import_router

__all__ = [
    "duplicate_cleanup_router",
    "listing_import_router",
]

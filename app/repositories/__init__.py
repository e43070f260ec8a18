"""
app/repositories package marker.
"""

from app.repositories.property_listing_repository import PropertyListingRepository

__all__ = [
    "PropertyListingRepository",
]

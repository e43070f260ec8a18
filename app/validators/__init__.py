"""
app/validators package marker.
"""

from app.validators.listing_validator import ListingValidator

__all__ = [
    "ListingValidator",
]

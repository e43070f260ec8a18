"""
app/mappers package marker.
"""

from app.mappers.field_parsers import (
    clean_text,
    extract_first_int,
    infer_housing_subtype,
    parse_location,
    parse_price,
)
from app.mappers.listing_normalizer import (
    DelimitedTextNormalizer,
    ListingNormalizer,
    StructuredDocumentNormalizer,
)

__all__ = [
    "DelimitedTextNormalizer",
    "ListingNormalizer",
    "StructuredDocumentNormalizer",
    "clean_text",
    "extract_first_int",
    "infer_housing_subtype",
    "parse_location",
    "parse_price",
]

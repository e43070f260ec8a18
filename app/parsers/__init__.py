"""
app/parsers package marker.
"""

from app.parsers.csv_parser import DelimitedTextBatch, parse_delimited_text
from app.parsers.document_parser import StructuredDocumentBatch, parse_structured_document
from app.parsers.errors import (
    InvalidDocumentStructureError,
    ListingStructureError,
    MalformedInputError,
    MissingColumnsError,
)

__all__ = [
    "DelimitedTextBatch",
    "InvalidDocumentStructureError",
    "ListingStructureError",
    "MalformedInputError",
    "MissingColumnsError",
    "StructuredDocumentBatch",
    "parse_delimited_text",
    "parse_structured_document",
]

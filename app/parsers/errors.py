"""
app/parsers/errors.py

Batch-fatal structural errors raised before any listing row is processed.
"""

from __future__ import annotations

from typing import Any, Sequence


class ListingStructureError(ValueError):
    """
    Raised when an import payload cannot be processed as a batch.
    """

    code = "invalid_structure"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class MalformedInputError(ListingStructureError):
    """
    Raised when the payload cannot be decoded or tokenized at all.
    """

    code = "malformed_input"


class MissingColumnsError(ListingStructureError):
    """
    Raised when a CSV header lacks required columns.
    """

    code = "missing_required_columns"

    def __init__(self, missing: Sequence[str], *, headers: Sequence[str] = ()) -> None:
        self.missing = tuple(missing)
        super().__init__(
            f"Missing required columns: {', '.join(self.missing)}.",
            details={"missing": list(self.missing), "headers": list(headers)},
        )


class InvalidDocumentStructureError(ListingStructureError):
    """
    Raised when a structured document does not have the expected shape.
    """

    code = "invalid_document_structure"

    def __init__(
        self,
        message: str,
        *,
        missing: Sequence[str] = (),
        details: dict[str, Any] | None = None,
    ) -> None:
        self.missing = tuple(missing)
        merged = dict(details or {})
        if self.missing:
            merged["missing"] = list(self.missing)
        super().__init__(message, details=merged)

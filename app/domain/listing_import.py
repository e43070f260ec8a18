"""
app/domain/listing_import.py

Domain models used by the listing import pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Protocol

SourceRow = Mapping[str, Any]

PROPERTY_KIND_DWELLING = "Vivienda"
SALE_STATUS_PENDING_REVIEW = "Pendiente"
LISTING_TYPE_SALE = "Venta"
DEFAULT_HOUSING_SUBTYPE = "Piso"


class SourceFormat:
    CSV = "csv"
    JSON = "json"


class RowStatus:
    SUCCESS = "success"
    DUPLICATE = "duplicate"
    ERROR = "error"


class VerdictKind:
    UNIQUE = "unique"
    DUPLICATE_IN_BATCH = "duplicate_in_batch"
    DUPLICATE_PERSISTED = "duplicate_persisted"


class MatchedKey:
    REFERENCE_URL = "reference_url"
    TITLE_PRICE = "title_price"


@dataclass(frozen=True)
class CanonicalListingCandidate:
    """
    Normalized listing prepared for persistence.
    """

    title: str
    price: int
    observations: str
    captured_at: datetime
    rooms: int = 0
    bathrooms: int = 0
    garage_spaces: int = 0
    square_meters: int | None = None
    province: str | None = None
    city: str | None = None
    street: str | None = None
    street_number: str | None = None
    property_kind: str = PROPERTY_KIND_DWELLING
    housing_subtype: str = DEFAULT_HOUSING_SUBTYPE
    listing_type: str | None = None
    sale_status: str = SALE_STATUS_PENDING_REVIEW
    reference_url: str | None = None
    contact_phone: str | None = None
    contact_name: str | None = None
    short_description: str | None = None
    description: str | None = None
    published: bool = False

    @property
    def title_price_key(self) -> tuple[str, int]:
        return (self.title.strip(), self.price)


@dataclass(frozen=True)
class FieldViolation:
    """
    One rule violation found while normalizing a row.
    """

    field: str
    message: str
    value: str | None = None


@dataclass(frozen=True)
class NormalizationOutcome:
    """
    Either a candidate or the violations that prevented building one.
    """

    candidate: CanonicalListingCandidate | None
    violations: tuple[FieldViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return self.candidate is not None and not self.violations

    def describe(self) -> str:
        return "; ".join(violation.message for violation in self.violations)


@dataclass(frozen=True)
class DuplicateVerdict:
    kind: str
    reason: str | None = None
    matched_key: str | None = None
    matched_row_index: int | None = None

    @property
    def is_duplicate(self) -> bool:
        return self.kind != VerdictKind.UNIQUE

    @classmethod
    def unique(cls) -> "DuplicateVerdict":
        return cls(kind=VerdictKind.UNIQUE)


@dataclass(frozen=True)
class ImportRowResult:
    """
    Outcome of one source row.
    """

    row_index: int
    status: str
    title_snapshot: str
    entity_id: str | None = None
    reason: str | None = None
    field: str | None = None
    source_row: dict[str, Any] | None = None


@dataclass(frozen=True)
class ImportSummary:
    total: int
    success_count: int
    duplicate_count: int
    error_count: int


@dataclass(frozen=True)
class ListingImportResult:
    """
    Full result of one import call: counts plus the ordered row details.
    """

    source_format: str
    summary: ImportSummary
    rows: list[ImportRowResult] = field(default_factory=list)
    completed: bool = True
    rows_in_batch: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StructureCheck:
    """
    Result of a dry-run structural validation.
    """

    valid: bool
    reason: str | None = None
    listings_count: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)


class ListingPersistenceError(RuntimeError):
    """
    Raised by a gateway when a listing cannot be read or written.
    """


class ListingGateway(Protocol):
    """
    Narrow persistence boundary consumed by the import pipeline.

    `create` returns the new listing id or raises ListingPersistenceError.
    """

    def exists_by_reference_url(self, url: str) -> bool: ...

    def exists_by_title_and_price(self, title: str, price: int) -> bool: ...

    def create(self, candidate: CanonicalListingCandidate) -> str: ...


@dataclass(frozen=True)
class ImportStats:
    """
    Counts of listings that entered the store through an import.
    """

    total_imported: int
    imported_today: int
    imported_from_json: int

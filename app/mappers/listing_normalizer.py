"""
app/mappers/listing_normalizer.py

Per-format normalization of source rows into canonical listing candidates.

Both normalizers are pure: they never touch the database, and every rule
violation is reported back as a FieldViolation instead of being raised.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Protocol

from app.domain.listing_import import (
    LISTING_TYPE_SALE,
    CanonicalListingCandidate,
    FieldViolation,
    NormalizationOutcome,
    SourceFormat,
    SourceRow,
)
from app.mappers.field_parsers import (
    clean_text,
    extract_first_int,
    infer_housing_subtype,
    parse_location,
    parse_price,
)
from app.validators.listing_validator import ListingValidator

IMPORT_PROVENANCE_PREFIX = "Importado desde"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def provenance_note(source_format: str, captured_at: datetime, *extra: str) -> str:
    """
    Build the observations text that records where a listing came from.
    """

    parts = [f"{IMPORT_PROVENANCE_PREFIX} {source_format.upper()}", *extra]
    parts.append(f"Importado el {captured_at.isoformat(timespec='seconds')}")
    return " - ".join(parts)


class ListingNormalizer(Protocol):
    source_format: str

    def normalize(self, row: SourceRow) -> NormalizationOutcome: ...


class _BaseNormalizer:
    source_format: str = ""

    def __init__(
        self,
        *,
        validator: ListingValidator | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._validator = validator or ListingValidator()
        self._clock = clock or _utc_now

    def _check(
        self,
        *,
        title: str | None,
        price: int,
        raw_price: Any,
    ) -> list[FieldViolation]:
        return self._validator.validate(title=title, price=price, raw_price=raw_price)


class DelimitedTextNormalizer(_BaseNormalizer):
    """
    Maps one CSV row (Titulo, Precio, Ubicacion, ...) to a candidate.
    """

    source_format = SourceFormat.CSV

    def normalize(self, row: SourceRow) -> NormalizationOutcome:
        title = clean_text(row.get("Titulo"))
        raw_price = row.get("Precio")
        price = parse_price(raw_price)

        violations = self._check(title=title, price=price, raw_price=raw_price)
        if violations or title is None:
            return NormalizationOutcome(candidate=None, violations=tuple(violations))

        location = clean_text(row.get("Ubicacion"))
        province, city = parse_location(location)
        captured_at = self._clock()

        short_description = "Propiedad importada desde CSV"
        if location:
            short_description = f"{short_description} - {location}"

        candidate = CanonicalListingCandidate(
            title=title,
            price=price,
            rooms=extract_first_int(row.get("Habitaciones")) or 0,
            bathrooms=extract_first_int(row.get("Banos")) or 0,
            square_meters=extract_first_int(row.get("Superficie")),
            province=province,
            city=city,
            housing_subtype=infer_housing_subtype(title),
            reference_url=clean_text(row.get("URL")),
            contact_phone=clean_text(row.get("Telefono")),
            contact_name=clean_text(row.get("Nombre_Contacto")),
            short_description=short_description,
            observations=provenance_note(self.source_format, captured_at),
            captured_at=captured_at,
        )
        return NormalizationOutcome(candidate=candidate)


class StructuredDocumentNormalizer(_BaseNormalizer):
    """
    Maps one `viviendas.todas` entry (titulo, precio, ubicacion, ...) to a candidate.
    """

    source_format = SourceFormat.JSON

    def normalize(self, row: SourceRow) -> NormalizationOutcome:
        if not isinstance(row, Mapping):
            return NormalizationOutcome(
                candidate=None,
                violations=(
                    FieldViolation(
                        field="entry",
                        message="Entry must be an object.",
                        value=str(row),
                    ),
                ),
            )

        title = clean_text(row.get("titulo"))
        raw_price = row.get("precio")
        price = parse_price(raw_price)

        violations = self._check(title=title, price=price, raw_price=raw_price)
        if violations or title is None:
            return NormalizationOutcome(candidate=None, violations=tuple(violations))

        province, city = parse_location(row.get("ubicacion"))
        captured_at = self._clock()
        advertiser = clean_text(row.get("anunciante")) or "N/A"

        candidate = CanonicalListingCandidate(
            title=title,
            price=price,
            rooms=extract_first_int(row.get("habitaciones")) or 0,
            square_meters=extract_first_int(row.get("metros")),
            province=province,
            city=city,
            housing_subtype=infer_housing_subtype(title),
            listing_type=LISTING_TYPE_SALE,
            reference_url=clean_text(row.get("url")),
            description=clean_text(row.get("descripcion")),
            observations=provenance_note(
                self.source_format,
                captured_at,
                f"Anunciante: {advertiser}",
            ),
            captured_at=captured_at,
        )
        return NormalizationOutcome(candidate=candidate)


def title_snapshot(row: Any) -> str:
    """
    Best-effort title of a raw row, used to label results.
    """

    if not isinstance(row, Mapping):
        return ""
    return clean_text(row.get("Titulo")) or clean_text(row.get("titulo")) or ""

"""
tests/test_listing_normalizer.py

Pytest unit tests for the CSV and JSON listing normalizers and the
validator they share.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.mappers.listing_normalizer import (
    DelimitedTextNormalizer,
    StructuredDocumentNormalizer,
    provenance_note,
    title_snapshot,
)
from app.validators.listing_validator import ListingValidator

FIXED_NOW = datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture()
def csv_normalizer(fixed_clock) -> DelimitedTextNormalizer:
    return DelimitedTextNormalizer(clock=fixed_clock)


@pytest.fixture()
def json_normalizer(fixed_clock) -> StructuredDocumentNormalizer:
    return StructuredDocumentNormalizer(clock=fixed_clock)


# ---------------------------------------------------------------------------
# CSV rows
# ---------------------------------------------------------------------------


class TestDelimitedTextNormalizer:
    def test_full_row_maps_every_field(self, csv_normalizer: DelimitedTextNormalizer) -> None:
        outcome = csv_normalizer.normalize(
            {
                "Titulo": "Piso céntrico en Barcelona",
                "Precio": "250.000 €",
                "Ubicacion": "Eixample, Barcelona",
                "Habitaciones": "3",
                "Banos": "2 baños",
                "Superficie": "85 m²",
                "Telefono": "612345678",
                "Nombre_Contacto": "Juan Pérez",
                "URL": "https://www.idealista.com/inmueble/12345",
            }
        )

        assert outcome.ok
        candidate = outcome.candidate
        assert candidate is not None
        assert candidate.title == "Piso céntrico en Barcelona"
        assert candidate.price == 250000
        assert candidate.rooms == 3
        assert candidate.bathrooms == 2
        assert candidate.garage_spaces == 0
        assert candidate.square_meters == 85
        assert candidate.province == "Barcelona"
        assert candidate.city == "Eixample"
        assert candidate.housing_subtype == "Piso"
        assert candidate.property_kind == "Vivienda"
        assert candidate.sale_status == "Pendiente"
        assert candidate.published is False
        assert candidate.listing_type is None
        assert candidate.reference_url == "https://www.idealista.com/inmueble/12345"
        assert candidate.contact_phone == "612345678"
        assert candidate.contact_name == "Juan Pérez"
        assert candidate.short_description == "Propiedad importada desde CSV - Eixample, Barcelona"
        assert candidate.observations == "Importado desde CSV - Importado el 2026-01-15T10:30:00+00:00"
        assert candidate.captured_at == FIXED_NOW

    def test_optional_columns_fall_back_to_defaults(
        self,
        csv_normalizer: DelimitedTextNormalizer,
    ) -> None:
        outcome = csv_normalizer.normalize({"Titulo": "Ático con terraza", "Precio": "380000"})

        candidate = outcome.candidate
        assert candidate is not None
        assert candidate.rooms == 0
        assert candidate.bathrooms == 0
        assert candidate.square_meters is None
        assert candidate.province is None
        assert candidate.city is None
        assert candidate.reference_url is None
        assert candidate.housing_subtype == "Ático"
        assert candidate.short_description == "Propiedad importada desde CSV"

    def test_title_is_trimmed(self, csv_normalizer: DelimitedTextNormalizer) -> None:
        outcome = csv_normalizer.normalize({"Titulo": "   Casa rural   ", "Precio": "100000"})
        assert outcome.candidate is not None
        assert outcome.candidate.title == "Casa rural"

    def test_all_violations_are_reported_together(
        self,
        csv_normalizer: DelimitedTextNormalizer,
    ) -> None:
        outcome = csv_normalizer.normalize({"Titulo": "ab", "Precio": "gratis"})

        assert not outcome.ok
        assert outcome.candidate is None
        assert [violation.field for violation in outcome.violations] == ["title", "price"]
        assert outcome.describe() == (
            "Title must be at least 3 characters long.; Price must be a positive integer."
        )

    def test_missing_title(self, csv_normalizer: DelimitedTextNormalizer) -> None:
        outcome = csv_normalizer.normalize({"Titulo": "  ", "Precio": "100000"})
        assert outcome.describe() == "Title is required."

    def test_zero_price_is_rejected(self, csv_normalizer: DelimitedTextNormalizer) -> None:
        outcome = csv_normalizer.normalize({"Titulo": "Piso", "Precio": "0"})
        assert [violation.field for violation in outcome.violations] == ["price"]
        assert outcome.violations[0].value == "0"


# ---------------------------------------------------------------------------
# JSON entries
# ---------------------------------------------------------------------------


class TestStructuredDocumentNormalizer:
    def test_entry_maps_to_sale_listing(self, json_normalizer: StructuredDocumentNormalizer) -> None:
        outcome = json_normalizer.normalize(
            {
                "titulo": "Chalet con piscina",
                "precio": "450.000€",
                "ubicacion": "Pozuelo de Alarcón, Madrid",
                "url": "https://www.fotocasa.es/inmueble/1",
                "habitaciones": "5 hab.",
                "metros": "300 m²",
                "descripcion": "  Amplio jardín  ",
                "anunciante": "Inmobiliaria Sol",
            }
        )

        candidate = outcome.candidate
        assert candidate is not None
        assert candidate.price == 450000
        assert candidate.rooms == 5
        assert candidate.bathrooms == 0
        assert candidate.square_meters == 300
        assert candidate.province == "Madrid"
        assert candidate.city == "Pozuelo de Alarcón"
        assert candidate.housing_subtype == "Chalet"
        assert candidate.listing_type == "Venta"
        assert candidate.description == "Amplio jardín"
        assert candidate.sale_status == "Pendiente"
        assert candidate.observations == (
            "Importado desde JSON - Anunciante: Inmobiliaria Sol - Importado el 2026-01-15T10:30:00+00:00"
        )

    def test_missing_advertiser_is_recorded_as_na(
        self,
        json_normalizer: StructuredDocumentNormalizer,
    ) -> None:
        outcome = json_normalizer.normalize({"titulo": "Piso reformado", "precio": 120000})
        assert outcome.candidate is not None
        assert "Anunciante: N/A" in outcome.candidate.observations

    def test_non_object_entry_is_a_violation(
        self,
        json_normalizer: StructuredDocumentNormalizer,
    ) -> None:
        outcome = json_normalizer.normalize("not an entry")  # type: ignore[arg-type]

        assert outcome.candidate is None
        assert outcome.violations[0].field == "entry"
        assert outcome.describe() == "Entry must be an object."

    def test_invalid_price(self, json_normalizer: StructuredDocumentNormalizer) -> None:
        outcome = json_normalizer.normalize({"titulo": "Piso reformado", "precio": "consultar"})
        assert outcome.describe() == "Price must be a positive integer."


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_provenance_note_with_extra_parts(self) -> None:
        note = provenance_note("json", FIXED_NOW, "Anunciante: X")
        assert note == "Importado desde JSON - Anunciante: X - Importado el 2026-01-15T10:30:00+00:00"

    def test_title_snapshot_reads_either_format(self) -> None:
        assert title_snapshot({"Titulo": " Piso "}) == "Piso"
        assert title_snapshot({"titulo": "Casa"}) == "Casa"
        assert title_snapshot({"Precio": "1"}) == ""
        assert title_snapshot(["not", "a", "row"]) == ""

    def test_validator_min_title_length_is_configurable(self) -> None:
        validator = ListingValidator(min_title_length=10)
        violations = validator.validate(title="Piso bonito", price=1)
        assert violations == []
        violations = validator.validate(title="Piso", price=1)
        assert violations[0].message == "Title must be at least 10 characters long."

"""
app/validators/listing_validator.py

Business-rule validation for normalized listing fields.
"""

from __future__ import annotations

from typing import Any

from app.domain.listing_import import FieldViolation

MIN_TITLE_LENGTH = 3


class ListingValidator:
    """
    Enforces the hard requirements every imported listing must meet.
    """

    def __init__(self, *, min_title_length: int = MIN_TITLE_LENGTH) -> None:
        self._min_title_length = max(1, min_title_length)

    def validate(
        self,
        *,
        title: str | None,
        price: int,
        raw_price: Any = None,
    ) -> list[FieldViolation]:
        """
        Return every violation found; an empty list means the row is valid.
        """

        violations: list[FieldViolation] = []

        if title is None:
            violations.append(
                FieldViolation(
                    field="title",
                    message="Title is required.",
                )
            )
        elif len(title) < self._min_title_length:
            violations.append(
                FieldViolation(
                    field="title",
                    message=f"Title must be at least {self._min_title_length} characters long.",
                    value=title,
                )
            )

        if price <= 0:
            violations.append(
                FieldViolation(
                    field="price",
                    message="Price must be a positive integer.",
                    value=self._stringify_value(raw_price),
                )
            )

        return violations

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

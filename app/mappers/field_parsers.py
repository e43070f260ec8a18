"""
app/mappers/field_parsers.py

Field-level parsing rules shared by both listing source formats.
"""

from __future__ import annotations

import math
import re
from typing import Any

from app.domain.listing_import import DEFAULT_HOUSING_SUBTYPE

_PRICE_NOISE = re.compile(r"[€$.,\s]")
_LEADING_INT = re.compile(r"[-+]?\d+")
_FIRST_DIGITS = re.compile(r"(\d+)")

# Checked in order; the first keyword found in the title wins.
HOUSING_SUBTYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Ático", ("ático", "atico")),
    ("Casa", ("casa",)),
    ("Chalet", ("chalet",)),
    ("Dúplex", ("dúplex", "duplex")),
    ("Villa", ("villa",)),
    ("Masía", ("masía", "masia")),
    ("Finca", ("finca",)),
    ("Loft", ("loft", "estudio")),
    ("Piso", ("piso",)),
)


def clean_text(value: Any) -> str | None:
    """
    Return trimmed text, or None for missing/blank values.
    """

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_int(value: float | str) -> int | None:
    # NaN, infinities and digit runs past the int-string limit are unparsable.
    try:
        return int(value)
    except (ValueError, OverflowError):
        return None


def parse_price(value: Any) -> int:
    """
    Parse a locale-formatted price ("90.000€", "1.200 €/mes") into an integer.

    Only the leading digit run of the cleaned text counts. Returns 0 when
    nothing numeric remains; callers enforce price > 0.
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return _to_int(value) or 0

    cleaned = _PRICE_NOISE.sub("", str(value))
    match = _LEADING_INT.match(cleaned)
    if match is None:
        return 0
    return _to_int(match.group(0)) or 0


def parse_location(value: Any) -> tuple[str | None, str | None]:
    """
    Split "city, province" style text into (province, city).

    Everything before the last comma is the city; a single segment is a city
    without province.
    """

    text = clean_text(value)
    if text is None:
        return None, None

    parts = [part.strip() for part in text.split(",")]
    parts = [part for part in parts if part]
    if not parts:
        return None, None
    if len(parts) == 1:
        return None, parts[0]
    return parts[-1], ", ".join(parts[:-1])


def infer_housing_subtype(title: Any) -> str:
    text = clean_text(title)
    if text is None:
        return DEFAULT_HOUSING_SUBTYPE

    lowered = text.lower()
    for subtype, keywords in HOUSING_SUBTYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return subtype
    return DEFAULT_HOUSING_SUBTYPE


def extract_first_int(value: Any) -> int | None:
    """
    Return the first run of digits in a noisy value ("3 hab." -> 3).
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _to_int(value) if math.isfinite(value) else None

    match = _FIRST_DIGITS.search(str(value))
    return _to_int(match.group(1)) if match else None

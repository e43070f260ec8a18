"""
app/parsers/csv_parser.py

Tokenizes delimited listing exports into ordered source rows.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from app.parsers.errors import MalformedInputError, MissingColumnsError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: tuple[str, ...] = ("Titulo", "Precio")

KNOWN_COLUMNS: tuple[str, ...] = (
    "Titulo",
    "Precio",
    "Ubicacion",
    "Habitaciones",
    "Banos",
    "Superficie",
    "Telefono",
    "Nombre_Contacto",
    "URL",
)

_BOM = "\ufeff"


@dataclass(frozen=True)
class DelimitedTextBatch:
    """
    Parsed CSV: trimmed headers plus one dict per data row, in file order.
    """

    headers: tuple[str, ...]
    rows: list[dict[str, str | None]] = field(default_factory=list)


def decode_text(raw: bytes | str) -> str:
    """
    Decode upload bytes as UTF-8 and drop a leading byte-order mark.
    """

    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedInputError("CSV must be UTF-8 encoded.") from exc
    else:
        text = raw
    return text[1:] if text.startswith(_BOM) else text


def parse_delimited_text(
    raw: bytes | str,
    *,
    required_columns: Sequence[str] = REQUIRED_COLUMNS,
) -> DelimitedTextBatch:
    """
    Parse CSV text using the first row as header.

    Raises MalformedInputError when the text cannot be tokenized or holds no
    data rows, and MissingColumnsError when required headers are absent.
    """

    text = decode_text(raw)
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        records = [record for record in reader if not _is_blank_record(record)]
    except csv.Error as exc:
        raise MalformedInputError(
            f"Invalid CSV format: {exc}",
            details={"line": reader.line_num},
        ) from exc

    if not records:
        raise MalformedInputError("CSV file is empty.")

    headers = tuple(header.strip() for header in records[0])
    missing = [column for column in required_columns if column not in headers]
    if missing:
        raise MissingColumnsError(missing, headers=headers)

    data_records = records[1:]
    if not data_records:
        raise MalformedInputError("CSV file has a header but no data rows.")

    ignored = [header for header in headers if header and header not in KNOWN_COLUMNS]
    if ignored:
        logger.info("CSV columns not used by the import columns=%s", ignored)

    rows = [_to_row(headers, record) for record in data_records]
    logger.info("CSV parsed headers=%s rows=%d", list(headers), len(rows))
    return DelimitedTextBatch(headers=headers, rows=rows)


def _to_row(headers: tuple[str, ...], record: list[str]) -> dict[str, str | None]:
    row: dict[str, str | None] = {}
    for position, header in enumerate(headers):
        if not header:
            continue
        value = record[position].strip() if position < len(record) else None
        row[header] = value
    return row


def _is_blank_record(record: list[Any]) -> bool:
    return all(str(value).strip() == "" for value in record)


TEMPLATE_EXAMPLE_ROWS: tuple[tuple[str, ...], ...] = (
    (
        "Piso céntrico en Barcelona",
        "250000",
        "Eixample, Barcelona",
        "3",
        "2",
        "85",
        "612345678",
        "Juan Pérez",
        "https://www.idealista.com/inmueble/12345",
    ),
    (
        "Ático con terraza en Madrid",
        "380000",
        "Salamanca, Madrid",
        "4",
        "2",
        "120",
        "698765432",
        "María García",
        "https://www.fotocasa.es/inmueble/67890",
    ),
)


def build_template() -> str:
    """
    Render a downloadable CSV with every recognised column and two sample rows.
    """

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(KNOWN_COLUMNS)
    writer.writerows(TEMPLATE_EXAMPLE_ROWS)
    return buffer.getvalue()

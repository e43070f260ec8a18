"""
app/parsers/document_parser.py

Structural checks and row extraction for JSON listing documents.

Expected shape::

    {
        "timestamp": "...", "url": "...", "total": 2,
        "particulares": 1, "inmobiliarias": 1,
        "viviendas": {"todas": [{"titulo": ..., "precio": ..., ...}, ...]}
    }

Only the first entry is probed for the required keys; later entries missing
them are caught row by row during normalization.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from app.parsers.errors import InvalidDocumentStructureError, MalformedInputError

logger = logging.getLogger(__name__)

COLLECTION_PATH: tuple[str, ...] = ("viviendas", "todas")
REQUIRED_ENTRY_KEYS: tuple[str, ...] = ("titulo", "precio", "ubicacion", "url")
METADATA_KEYS: tuple[str, ...] = ("timestamp", "url", "total", "particulares", "inmobiliarias")


@dataclass(frozen=True)
class StructuredDocumentBatch:
    """
    Entries of one document, in order, plus its top-level metadata.
    """

    rows: list[Any] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


def load_document(document: Any) -> Any:
    """
    Accept an already-decoded document or JSON text/bytes.
    """

    if isinstance(document, (bytes, bytearray)):
        try:
            document = document.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedInputError("JSON document must be UTF-8 encoded.") from exc
    if isinstance(document, str):
        try:
            return json.loads(document)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(f"Invalid JSON document: {exc.msg}") from exc
    return document


def extract_metadata(document: Mapping[str, Any]) -> dict[str, Any]:
    return {key: document.get(key) for key in METADATA_KEYS}


def parse_structured_document(document: Any) -> StructuredDocumentBatch:
    """
    Validate the document shape and return its entries.

    Raises InvalidDocumentStructureError when the collection node is missing
    or empty, when the first entry lacks required keys, or when `total` is not
    a number.
    """

    payload = load_document(document)
    if not isinstance(payload, Mapping):
        raise InvalidDocumentStructureError("The document must be a JSON object.")

    entries = _collection(payload)
    if entries is None:
        raise InvalidDocumentStructureError(
            'The document must contain a "viviendas.todas" list of listings.',
        )
    if not entries:
        raise InvalidDocumentStructureError("The document contains no listings to import.")

    sample = entries[0]
    if not isinstance(sample, Mapping):
        raise InvalidDocumentStructureError("Listings must be JSON objects.")

    missing = [key for key in REQUIRED_ENTRY_KEYS if not sample.get(key)]
    if missing:
        raise InvalidDocumentStructureError(
            f"Listings must include the required fields: {', '.join(missing)}.",
            missing=missing,
        )

    total = payload.get("total")
    if total is not None and (isinstance(total, bool) or not isinstance(total, (int, float))):
        raise InvalidDocumentStructureError('The "total" field must be a number.')

    metadata = extract_metadata(payload)
    logger.info("JSON document parsed entries=%d declared_total=%s", len(entries), total)
    return StructuredDocumentBatch(rows=list(entries), metadata=metadata)


def _collection(payload: Mapping[str, Any]) -> list[Any] | None:
    node: Any = payload
    for key in COLLECTION_PATH:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node if isinstance(node, list) else None

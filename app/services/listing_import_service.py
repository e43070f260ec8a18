"""
app/services/listing_import_service.py

Service layer for bulk listing imports from CSV exports and JSON documents.

Each import runs in three stages:

    1. parse: structural checks; failures raise ListingStructureError and
       abort the batch before any row is touched
    2. row loop: normalize, duplicate check, create, strictly in input
       order; every row ends as success, duplicate or error
    3. report: fold row outcomes into an ImportSummary

Once parsing succeeds the service does not raise: gateway and validation
failures are recorded on the offending row and the loop moves on.
"""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Any, Callable, Mapping, Sequence

from app.config import get_listing_import_settings
from app.domain.listing_import import (
    ImportRowResult,
    ListingGateway,
    ListingImportResult,
    ListingPersistenceError,
    RowStatus,
    SourceFormat,
    StructureCheck,
)
from app.mappers.listing_normalizer import (
    DelimitedTextNormalizer,
    ListingNormalizer,
    StructuredDocumentNormalizer,
    title_snapshot,
)
from app.parsers.csv_parser import parse_delimited_text
from app.parsers.document_parser import parse_structured_document
from app.parsers.errors import ListingStructureError
from app.services.duplicate_detector import BatchIndex, DuplicateDetector
from app.services.import_result_reporter import summarize

logger = logging.getLogger(__name__)


class ListingImportService:
    """
    Coordinates parsing, normalization, duplicate detection, and persistence.
    """

    def __init__(
        self,
        *,
        log_row_outcomes: bool = True,
        deadline_seconds: float | None = None,
        detector: DuplicateDetector | None = None,
        csv_normalizer: ListingNormalizer | None = None,
        document_normalizer: ListingNormalizer | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._log_row_outcomes = log_row_outcomes
        self._deadline_seconds = deadline_seconds
        self._detector = detector or DuplicateDetector()
        self._csv_normalizer = csv_normalizer or DelimitedTextNormalizer()
        self._document_normalizer = document_normalizer or StructuredDocumentNormalizer()
        self._timer = timer

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def import_from_delimited_text(
        self,
        raw: bytes | str,
        *,
        gateway: ListingGateway,
        deadline_seconds: float | None = None,
    ) -> ListingImportResult:
        """
        Import every row of a CSV export.

        Raises ListingStructureError (malformed text, missing Titulo/Precio
        columns, no data rows) before any row is processed.
        """

        batch = parse_delimited_text(raw)
        return self._run(
            source_format=SourceFormat.CSV,
            rows=batch.rows,
            normalizer=self._csv_normalizer,
            gateway=gateway,
            deadline_seconds=deadline_seconds,
            metadata={"headers": list(batch.headers)},
        )

    def import_from_structured_document(
        self,
        document: Any,
        *,
        gateway: ListingGateway,
        deadline_seconds: float | None = None,
    ) -> ListingImportResult:
        """
        Import every entry of a JSON document's `viviendas.todas` list.

        Raises ListingStructureError before any entry is processed when the
        document shape or its first entry is invalid.
        """

        batch = parse_structured_document(document)
        return self._run(
            source_format=SourceFormat.JSON,
            rows=batch.rows,
            normalizer=self._document_normalizer,
            gateway=gateway,
            deadline_seconds=deadline_seconds,
            metadata=batch.metadata,
        )

    def validate_structure(self, document: Any) -> StructureCheck:
        """
        Dry-run the JSON structural checks without persisting anything.
        """

        try:
            batch = parse_structured_document(document)
        except ListingStructureError as exc:
            return StructureCheck(valid=False, reason=exc.message)
        return StructureCheck(valid=True, listings_count=len(batch.rows), metadata=batch.metadata)

    def validate_delimited_text(self, raw: bytes | str) -> StructureCheck:
        """
        Dry-run the CSV structural checks without persisting anything.
        """

        try:
            batch = parse_delimited_text(raw)
        except ListingStructureError as exc:
            return StructureCheck(valid=False, reason=exc.message)
        return StructureCheck(
            valid=True,
            listings_count=len(batch.rows),
            metadata={"headers": list(batch.headers)},
        )

    # ------------------------------------------------------------------
    # Row loop
    # ------------------------------------------------------------------

    def _run(
        self,
        *,
        source_format: str,
        rows: Sequence[Any],
        normalizer: ListingNormalizer,
        gateway: ListingGateway,
        deadline_seconds: float | None,
        metadata: dict[str, Any],
    ) -> ListingImportResult:
        deadline = deadline_seconds if deadline_seconds is not None else self._deadline_seconds
        started = self._timer()
        batch_index = BatchIndex()
        results: list[ImportRowResult] = []
        completed = True

        logger.info("Listing import started format=%s rows=%d", source_format, len(rows))

        for row_index, row in enumerate(rows, start=1):
            if deadline is not None and self._timer() - started >= deadline:
                completed = False
                logger.warning(
                    "Listing import deadline reached format=%s processed=%d remaining=%d",
                    source_format,
                    len(results),
                    len(rows) - len(results),
                )
                break

            result = self._process_row(
                row_index=row_index,
                row=row,
                normalizer=normalizer,
                batch_index=batch_index,
                gateway=gateway,
            )
            results.append(result)
            self._log_outcome(source_format, result)

        summary = summarize(results)
        logger.info(
            "Listing import finished format=%s total=%d success=%d duplicates=%d errors=%d completed=%s",
            source_format,
            summary.total,
            summary.success_count,
            summary.duplicate_count,
            summary.error_count,
            completed,
        )
        return ListingImportResult(
            source_format=source_format,
            summary=summary,
            rows=results,
            completed=completed,
            rows_in_batch=len(rows),
            metadata=metadata,
        )

    def _process_row(
        self,
        *,
        row_index: int,
        row: Any,
        normalizer: ListingNormalizer,
        batch_index: BatchIndex,
        gateway: ListingGateway,
    ) -> ImportRowResult:
        snapshot = title_snapshot(row)

        try:
            outcome = normalizer.normalize(row)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Listing normalization failed row=%d title=%r", row_index, snapshot)
            return ImportRowResult(
                row_index=row_index,
                status=RowStatus.ERROR,
                title_snapshot=snapshot,
                reason=f"Row could not be normalized: {exc}",
                source_row=_copy_row(row),
            )

        candidate = outcome.candidate
        if not outcome.ok or candidate is None:
            return ImportRowResult(
                row_index=row_index,
                status=RowStatus.ERROR,
                title_snapshot=snapshot,
                reason=outcome.describe(),
                field=",".join(violation.field for violation in outcome.violations) or None,
                source_row=_copy_row(row),
            )

        try:
            verdict = self._detector.classify(candidate, batch_index, gateway)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Duplicate check failed row=%d title=%r", row_index, candidate.title)
            return ImportRowResult(
                row_index=row_index,
                status=RowStatus.ERROR,
                title_snapshot=candidate.title,
                reason=f"Duplicate check failed: {exc}",
                source_row=_copy_row(row),
            )

        if verdict.is_duplicate:
            return ImportRowResult(
                row_index=row_index,
                status=RowStatus.DUPLICATE,
                title_snapshot=candidate.title,
                reason=verdict.reason,
                field=verdict.matched_key,
            )

        try:
            entity_id = gateway.create(candidate)
        except ListingPersistenceError as exc:
            return ImportRowResult(
                row_index=row_index,
                status=RowStatus.ERROR,
                title_snapshot=candidate.title,
                reason=str(exc),
                source_row=_copy_row(row),
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("Listing create failed row=%d title=%r", row_index, candidate.title)
            return ImportRowResult(
                row_index=row_index,
                status=RowStatus.ERROR,
                title_snapshot=candidate.title,
                reason=f"Listing could not be saved: {exc}",
                source_row=_copy_row(row),
            )

        batch_index.add(candidate, row_index=row_index)
        return ImportRowResult(
            row_index=row_index,
            status=RowStatus.SUCCESS,
            title_snapshot=candidate.title,
            entity_id=entity_id,
        )

    def _log_outcome(self, source_format: str, result: ImportRowResult) -> None:
        if not self._log_row_outcomes:
            return
        if result.status == RowStatus.SUCCESS:
            logger.info(
                "Listing imported format=%s row=%d id=%s title=%r",
                source_format,
                result.row_index,
                result.entity_id,
                result.title_snapshot,
            )
        elif result.status == RowStatus.DUPLICATE:
            logger.warning(
                "Listing skipped as duplicate format=%s row=%d reason=%s title=%r",
                source_format,
                result.row_index,
                result.reason,
                result.title_snapshot,
            )
        else:
            logger.warning(
                "Listing row rejected format=%s row=%d field=%s reason=%s",
                source_format,
                result.row_index,
                result.field,
                result.reason,
            )


def _copy_row(row: Any) -> dict[str, Any]:
    if isinstance(row, Mapping):
        return dict(row)
    return {"value": row}


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_listing_import_service() -> ListingImportService:
    """
    Build and cache the import service with env-driven settings.
    """

    settings = get_listing_import_settings()
    return ListingImportService(
        log_row_outcomes=settings.log_row_outcomes,
        deadline_seconds=settings.deadline_seconds,
    )

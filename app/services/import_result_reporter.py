"""
app/services/import_result_reporter.py

Folds per-row import outcomes into summary counts.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from app.domain.listing_import import ImportRowResult, ImportSummary, RowStatus


def summarize(rows: Sequence[ImportRowResult]) -> ImportSummary:
    """
    Count row outcomes; every row has exactly one status, so the three
    counts always add up to the total.
    """

    counts = Counter(row.status for row in rows)
    unknown = set(counts) - {RowStatus.SUCCESS, RowStatus.DUPLICATE, RowStatus.ERROR}
    if unknown:
        raise ValueError(f"Unknown row status values: {sorted(unknown)}")

    return ImportSummary(
        total=len(rows),
        success_count=counts[RowStatus.SUCCESS],
        duplicate_count=counts[RowStatus.DUPLICATE],
        error_count=counts[RowStatus.ERROR],
    )


def failed_rows(rows: Sequence[ImportRowResult]) -> list[ImportRowResult]:
    """
    Rows an operator needs to look at: duplicates and errors, in order.
    """

    return [row for row in rows if row.status != RowStatus.SUCCESS]

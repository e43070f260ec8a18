"""
app/schemas/listing_import.py

Response schemas for listing import, statistics, and duplicate cleanup endpoints.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, Field

from app.domain.duplicate_cleanup import DuplicateAnalysis, DuplicateCleanupResult
from app.domain.listing_import import ImportStats, ListingImportResult, StructureCheck


def _json_safe(value: Any) -> Any:
    """
    Replace NaN and infinities, which JSON responses cannot carry, with their text.
    """

    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    return value


class ImportSummaryResponse(BaseModel):
    total: int = Field(..., ge=0)
    success_count: int = Field(..., ge=0)
    duplicate_count: int = Field(..., ge=0)
    error_count: int = Field(..., ge=0)


class ImportRowResultResponse(BaseModel):
    """
    API response model for the outcome of one source row.
    """

    row_index: int = Field(..., ge=1)
    status: Literal["success", "duplicate", "error"]
    title_snapshot: str
    entity_id: str | None = None
    reason: str | None = None
    field: str | None = None
    source_row: dict[str, Any] | None = None


class ListingImportResponse(BaseModel):
    """
    API response model for a completed (or deadline-truncated) import.
    """

    source_format: Literal["csv", "json"]
    summary: ImportSummaryResponse
    rows: list[ImportRowResultResponse] = Field(default_factory=list)
    completed: bool = True
    rows_in_batch: int = Field(0, ge=0)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ListingImportResult) -> "ListingImportResponse":
        return cls(
            source_format=result.source_format,
            summary=ImportSummaryResponse(
                total=result.summary.total,
                success_count=result.summary.success_count,
                duplicate_count=result.summary.duplicate_count,
                error_count=result.summary.error_count,
            ),
            rows=[
                ImportRowResultResponse(
                    row_index=row.row_index,
                    status=row.status,
                    title_snapshot=row.title_snapshot,
                    entity_id=row.entity_id,
                    reason=row.reason,
                    field=row.field,
                    source_row=_json_safe(row.source_row),
                )
                for row in result.rows
            ],
            completed=result.completed,
            rows_in_batch=result.rows_in_batch,
            metadata=_json_safe(result.metadata),
        )


class StructureCheckResponse(BaseModel):
    valid: bool
    reason: str | None = None
    listings_count: int = Field(0, ge=0)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_check(cls, check: StructureCheck) -> "StructureCheckResponse":
        return cls(
            valid=check.valid,
            reason=check.reason,
            listings_count=check.listings_count,
            metadata=_json_safe(check.metadata),
        )


class ImportStatsResponse(BaseModel):
    total_imported: int = Field(..., ge=0)
    imported_today: int = Field(..., ge=0)
    imported_from_json: int = Field(..., ge=0)

    @classmethod
    def from_stats(cls, stats: ImportStats) -> "ImportStatsResponse":
        return cls(
            total_imported=stats.total_imported,
            imported_today=stats.imported_today,
            imported_from_json=stats.imported_from_json,
        )


class DuplicateGroupResponse(BaseModel):
    title: str
    price: int
    count: int = Field(..., ge=2)
    keep_id: str
    surplus_ids: list[str] = Field(default_factory=list)


class DuplicateAnalysisResponse(BaseModel):
    """
    API response model for stored duplicate groups awaiting cleanup.
    """

    group_count: int = Field(..., ge=0)
    surplus_count: int = Field(..., ge=0)
    groups: list[DuplicateGroupResponse] = Field(default_factory=list)

    @classmethod
    def from_analysis(cls, analysis: DuplicateAnalysis) -> "DuplicateAnalysisResponse":
        return cls(
            group_count=analysis.group_count,
            surplus_count=analysis.surplus_count,
            groups=[
                DuplicateGroupResponse(
                    title=group.title,
                    price=group.price,
                    count=len(group.listing_ids),
                    keep_id=group.keep_id,
                    surplus_ids=list(group.surplus_ids),
                )
                for group in analysis.groups
            ],
        )


class GroupCleanupResponse(BaseModel):
    title: str
    price: int
    kept_id: str
    deleted_ids: list[str] = Field(default_factory=list)
    error: str | None = None


class DuplicateCleanupResponse(BaseModel):
    """
    API response model for a duplicate cleanup run.
    """

    deleted_count: int = Field(..., ge=0)
    failed_count: int = Field(..., ge=0)
    groups: list[GroupCleanupResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: DuplicateCleanupResult) -> "DuplicateCleanupResponse":
        return cls(
            deleted_count=result.deleted_count,
            failed_count=result.failed_count,
            groups=[
                GroupCleanupResponse(
                    title=outcome.title,
                    price=outcome.price,
                    kept_id=outcome.kept_id,
                    deleted_ids=list(outcome.deleted_ids),
                    error=outcome.error,
                )
                for outcome in result.outcomes
            ],
        )


class HealthResponse(BaseModel):
    status: str = "ok"

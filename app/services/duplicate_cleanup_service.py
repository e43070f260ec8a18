"""
app/services/duplicate_cleanup_service.py

Finds and removes stored listings that share a title + price.

Only listings still pending review are considered; the oldest listing of
each group is kept and the rest are deleted. Each group is cleaned in its
own transaction, so one failing group does not block the others.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from app.domain.duplicate_cleanup import (
    DuplicateAnalysis,
    DuplicateCleanupResult,
    DuplicateGroup,
    GroupCleanupOutcome,
)
from app.domain.listing_import import ListingPersistenceError

logger = logging.getLogger(__name__)


class DuplicateStore(Protocol):
    def find_pending_duplicate_groups(self) -> list[DuplicateGroup]: ...

    def delete_listings(self, listing_ids: Sequence[str]) -> int: ...


class DuplicateCleanupService:
    def __init__(self, store: DuplicateStore) -> None:
        self._store = store

    def analyze(self) -> DuplicateAnalysis:
        analysis = DuplicateAnalysis(groups=self._store.find_pending_duplicate_groups())
        logger.info(
            "Duplicate analysis groups=%d surplus=%d",
            analysis.group_count,
            analysis.surplus_count,
        )
        return analysis

    def clean(self) -> DuplicateCleanupResult:
        """
        Delete the surplus listings of every duplicate group.
        """

        outcomes: list[GroupCleanupOutcome] = []
        for group in self._store.find_pending_duplicate_groups():
            try:
                self._store.delete_listings(group.surplus_ids)
            except ListingPersistenceError as exc:
                logger.warning(
                    "Duplicate cleanup failed title=%r price=%d error=%s",
                    group.title,
                    group.price,
                    exc,
                )
                outcomes.append(
                    GroupCleanupOutcome(
                        title=group.title,
                        price=group.price,
                        kept_id=group.keep_id,
                        error=str(exc),
                    )
                )
                continue

            outcomes.append(
                GroupCleanupOutcome(
                    title=group.title,
                    price=group.price,
                    kept_id=group.keep_id,
                    deleted_ids=group.surplus_ids,
                )
            )

        result = DuplicateCleanupResult(outcomes=outcomes)
        logger.info(
            "Duplicate cleanup finished groups=%d deleted=%d failed=%d",
            len(outcomes),
            result.deleted_count,
            result.failed_count,
        )
        return result

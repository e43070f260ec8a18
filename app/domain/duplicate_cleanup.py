"""
app/domain/duplicate_cleanup.py

Domain models for analyzing and cleaning stored duplicate listings.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DuplicateGroup:
    """
    Pending-review listings sharing one title + price key.

    `listing_ids` is ordered oldest first; the first id is the one kept.
    """

    title: str
    price: int
    listing_ids: tuple[str, ...]

    @property
    def keep_id(self) -> str:
        return self.listing_ids[0]

    @property
    def surplus_ids(self) -> tuple[str, ...]:
        return self.listing_ids[1:]


@dataclass(frozen=True)
class DuplicateAnalysis:
    groups: list[DuplicateGroup] = field(default_factory=list)

    @property
    def group_count(self) -> int:
        return len(self.groups)

    @property
    def surplus_count(self) -> int:
        return sum(len(group.surplus_ids) for group in self.groups)


@dataclass(frozen=True)
class GroupCleanupOutcome:
    title: str
    price: int
    kept_id: str
    deleted_ids: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DuplicateCleanupResult:
    outcomes: list[GroupCleanupOutcome] = field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return sum(len(outcome.deleted_ids) for outcome in self.outcomes)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.ok)

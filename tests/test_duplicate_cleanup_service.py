from __future__ import annotations

import unittest
from typing import Sequence

from app.domain.duplicate_cleanup import DuplicateGroup
from app.domain.listing_import import ListingPersistenceError
from app.services.duplicate_cleanup_service import DuplicateCleanupService


class _FakeStore:
    def __init__(self, groups: list[DuplicateGroup], *, failing_ids: frozenset[str] = frozenset()) -> None:
        self.groups = groups
        self.failing_ids = failing_ids
        self.deleted: list[str] = []

    def find_pending_duplicate_groups(self) -> list[DuplicateGroup]:
        return list(self.groups)

    def delete_listings(self, listing_ids: Sequence[str]) -> int:
        if self.failing_ids & set(listing_ids):
            raise ListingPersistenceError("Listings could not be deleted: database error.")
        self.deleted.extend(listing_ids)
        return len(listing_ids)


class TestDuplicateCleanupService(unittest.TestCase):
    def setUp(self) -> None:
        self.groups = [
            DuplicateGroup(title="Piso céntrico", price=250000, listing_ids=("a", "b", "c")),
            DuplicateGroup(title="Casa rural", price=120000, listing_ids=("d", "e")),
        ]

    def test_analyze_counts_surplus(self) -> None:
        analysis = DuplicateCleanupService(_FakeStore(self.groups)).analyze()

        self.assertEqual(analysis.group_count, 2)
        self.assertEqual(analysis.surplus_count, 3)
        self.assertEqual(analysis.groups[0].keep_id, "a")

    def test_clean_deletes_all_but_oldest(self) -> None:
        store = _FakeStore(self.groups)

        result = DuplicateCleanupService(store).clean()

        self.assertEqual(store.deleted, ["b", "c", "e"])
        self.assertEqual(result.deleted_count, 3)
        self.assertEqual([outcome.kept_id for outcome in result.outcomes], ["a", "d"])

    def test_failing_group_does_not_block_others(self) -> None:
        store = _FakeStore(self.groups, failing_ids=frozenset({"b"}))

        result = DuplicateCleanupService(store).clean()

        self.assertEqual(result.failed_count, 1)
        self.assertEqual(result.deleted_count, 1)
        self.assertFalse(result.outcomes[0].ok)
        self.assertEqual(result.outcomes[0].deleted_ids, ())
        self.assertEqual(store.deleted, ["e"])


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import unittest

from app.domain.listing_import import ImportRowResult, RowStatus
from app.services.import_result_reporter import failed_rows, summarize


class TestImportResultReporter(unittest.TestCase):
    def setUp(self) -> None:
        self.rows = [
            ImportRowResult(row_index=1, status=RowStatus.SUCCESS, title_snapshot="A", entity_id="1"),
            ImportRowResult(row_index=2, status=RowStatus.DUPLICATE, title_snapshot="A", reason="dup"),
            ImportRowResult(row_index=3, status=RowStatus.ERROR, title_snapshot="", reason="bad"),
            ImportRowResult(row_index=4, status=RowStatus.SUCCESS, title_snapshot="B", entity_id="2"),
        ]

    def test_counts_add_up_to_total(self) -> None:
        summary = summarize(self.rows)

        self.assertEqual(summary.total, 4)
        self.assertEqual(summary.success_count, 2)
        self.assertEqual(summary.duplicate_count, 1)
        self.assertEqual(summary.error_count, 1)
        self.assertEqual(
            summary.success_count + summary.duplicate_count + summary.error_count,
            summary.total,
        )

    def test_empty_rows(self) -> None:
        summary = summarize([])
        self.assertEqual(summary.total, 0)
        self.assertEqual(summary.error_count, 0)

    def test_unknown_status_is_rejected(self) -> None:
        rows = [ImportRowResult(row_index=1, status="skipped", title_snapshot="A")]
        with self.assertRaises(ValueError):
            summarize(rows)

    def test_failed_rows_keep_order(self) -> None:
        self.assertEqual([row.row_index for row in failed_rows(self.rows)], [2, 3])


if __name__ == "__main__":
    unittest.main()

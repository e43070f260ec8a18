"""
app/services/duplicate_detector.py

Three-tier duplicate detection for listing candidates.

Tiers are evaluated in order and the first match wins:

    1. in batch: an earlier accepted row of the same import shares the
       reference URL, or the trimmed title and price
    2. persisted URL: the store already holds the reference URL
    3. persisted key: the store already holds the same title and price

Title + price is a coarse key: two distinct properties with the same title
and price are reported as duplicates.
"""

from __future__ import annotations

from app.domain.listing_import import (
    CanonicalListingCandidate,
    DuplicateVerdict,
    ListingGateway,
    MatchedKey,
    VerdictKind,
)


class BatchIndex:
    """
    Accepted candidates of one import call, keyed for O(1) lookups.

    Owned by a single import invocation and discarded with it.
    """

    def __init__(self) -> None:
        self._by_reference_url: dict[str, int] = {}
        self._by_title_price: dict[tuple[str, int], int] = {}

    def __len__(self) -> int:
        return len(self._by_title_price)

    def add(self, candidate: CanonicalListingCandidate, *, row_index: int) -> None:
        if candidate.reference_url:
            self._by_reference_url.setdefault(candidate.reference_url, row_index)
        self._by_title_price.setdefault(candidate.title_price_key, row_index)

    def row_for_reference_url(self, url: str | None) -> int | None:
        if not url:
            return None
        return self._by_reference_url.get(url)

    def row_for_title_price(self, candidate: CanonicalListingCandidate) -> int | None:
        return self._by_title_price.get(candidate.title_price_key)


class DuplicateDetector:
    """
    Classifies a candidate against its batch and the persistent store.
    """

    def classify(
        self,
        candidate: CanonicalListingCandidate,
        batch_index: BatchIndex,
        gateway: ListingGateway,
    ) -> DuplicateVerdict:
        """
        Return the first matching verdict, or a unique verdict.

        Gateway exceptions propagate to the caller.
        """

        in_batch = self._check_batch(candidate, batch_index)
        if in_batch is not None:
            return in_batch

        if candidate.reference_url and gateway.exists_by_reference_url(candidate.reference_url):
            return DuplicateVerdict(
                kind=VerdictKind.DUPLICATE_PERSISTED,
                reason="Reference URL already exists",
                matched_key=MatchedKey.REFERENCE_URL,
            )

        title, price = candidate.title_price_key
        if gateway.exists_by_title_and_price(title, price):
            return DuplicateVerdict(
                kind=VerdictKind.DUPLICATE_PERSISTED,
                reason="Title and price already exist",
                matched_key=MatchedKey.TITLE_PRICE,
            )

        return DuplicateVerdict.unique()

    @staticmethod
    def _check_batch(
        candidate: CanonicalListingCandidate,
        batch_index: BatchIndex,
    ) -> DuplicateVerdict | None:
        matched_row = batch_index.row_for_reference_url(candidate.reference_url)
        if matched_row is not None:
            return DuplicateVerdict(
                kind=VerdictKind.DUPLICATE_IN_BATCH,
                reason=f"Reference URL already imported in this batch (row {matched_row})",
                matched_key=MatchedKey.REFERENCE_URL,
                matched_row_index=matched_row,
            )

        matched_row = batch_index.row_for_title_price(candidate)
        if matched_row is not None:
            return DuplicateVerdict(
                kind=VerdictKind.DUPLICATE_IN_BATCH,
                reason=f"Title and price already imported in this batch (row {matched_row})",
                matched_key=MatchedKey.TITLE_PRICE,
                matched_row_index=matched_row,
            )

        return None

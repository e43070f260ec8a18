"""
tests/conftest.py

Shared fixtures: an in-memory listing gateway and a fixed clock.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import pytest

from app.domain.listing_import import CanonicalListingCandidate, ListingPersistenceError

FIXED_NOW = datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)


class InMemoryListingGateway:
    """
    Dict-backed gateway that records every call it receives.
    """

    def __init__(
        self,
        *,
        fail_create_titles: tuple[str, ...] = (),
        fail_lookups: bool = False,
    ) -> None:
        self.listings: dict[str, CanonicalListingCandidate] = {}
        self.lookups: list[tuple[str, object]] = []
        self._fail_create_titles = set(fail_create_titles)
        self._fail_lookups = fail_lookups

    @property
    def created(self) -> list[CanonicalListingCandidate]:
        return list(self.listings.values())

    def exists_by_reference_url(self, url: str) -> bool:
        self.lookups.append(("reference_url", url))
        if self._fail_lookups:
            raise ListingPersistenceError("lookup unavailable")
        return any(listing.reference_url == url for listing in self.listings.values())

    def exists_by_title_and_price(self, title: str, price: int) -> bool:
        self.lookups.append(("title_price", (title, price)))
        if self._fail_lookups:
            raise ListingPersistenceError("lookup unavailable")
        return any(
            listing.title.strip() == title.strip() and listing.price == price
            for listing in self.listings.values()
        )

    def create(self, candidate: CanonicalListingCandidate) -> str:
        if candidate.title in self._fail_create_titles:
            raise ListingPersistenceError("Listing could not be saved: database error.")
        listing_id = f"listing-{len(self.listings) + 1}"
        self.listings[listing_id] = candidate
        return listing_id


@pytest.fixture()
def gateway() -> InMemoryListingGateway:
    return InMemoryListingGateway()


@pytest.fixture()
def make_gateway() -> Callable[..., InMemoryListingGateway]:
    return InMemoryListingGateway


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW

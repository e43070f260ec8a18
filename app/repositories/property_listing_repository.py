"""
app/repositories/property_listing_repository.py

Persistence layer for imported property listings.

Implements the import pipeline's gateway (existence probes + per-row create)
and the read/delete queries behind import statistics and duplicate cleanup.
Every create commits on its own so a failing row never rolls back the rows
imported before it.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, time, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.duplicate_cleanup import DuplicateGroup
from app.domain.listing_import import (
    SALE_STATUS_PENDING_REVIEW,
    CanonicalListingCandidate,
    ImportStats,
    ListingPersistenceError,
)
from app.mappers.listing_normalizer import IMPORT_PROVENANCE_PREFIX
from db.models.property_listing import PropertyListing

logger = logging.getLogger(__name__)


class PropertyListingRepository:
    """
    Repository for property listing reads and writes.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Gateway used by the import pipeline
    # ------------------------------------------------------------------

    def exists_by_reference_url(self, url: str) -> bool:
        stmt = select(PropertyListing.id).where(PropertyListing.reference_url == url).limit(1)
        return self._probe(stmt, what="reference_url")

    def exists_by_title_and_price(self, title: str, price: int) -> bool:
        stmt = (
            select(PropertyListing.id)
            .where(PropertyListing.title == title.strip())
            .where(PropertyListing.price == price)
            .limit(1)
        )
        return self._probe(stmt, what="title_price")

    def create(self, candidate: CanonicalListingCandidate) -> str:
        """
        Insert one listing and commit; return its id as a string.
        """

        listing = PropertyListing(
            title=candidate.title,
            price=candidate.price,
            rooms=candidate.rooms,
            bathrooms=candidate.bathrooms,
            garage_spaces=candidate.garage_spaces,
            square_meters=candidate.square_meters,
            province=candidate.province,
            city=candidate.city,
            street=candidate.street,
            street_number=candidate.street_number,
            property_kind=candidate.property_kind,
            housing_subtype=candidate.housing_subtype,
            listing_type=candidate.listing_type,
            sale_status=candidate.sale_status,
            reference_url=candidate.reference_url,
            contact_phone=candidate.contact_phone,
            contact_name=candidate.contact_name,
            short_description=candidate.short_description,
            description=candidate.description,
            observations=candidate.observations,
            published=candidate.published,
            captured_at=candidate.captured_at,
        )
        try:
            self._session.add(listing)
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            logger.warning("Listing insert rejected title=%r error=%s", candidate.title, exc.orig)
            raise ListingPersistenceError(
                "Listing could not be saved: it conflicts with an existing listing."
            ) from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Listing insert failed title=%r error=%s", candidate.title, exc)
            raise ListingPersistenceError("Listing could not be saved: database error.") from exc

        return str(listing.id)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def import_stats(self, *, now: datetime | None = None) -> ImportStats:
        """
        Count imported listings overall, captured today (UTC), and from JSON.
        """

        current = now or datetime.now(timezone.utc)
        start_of_day = datetime.combine(current.date(), time.min, tzinfo=current.tzinfo)
        imported = PropertyListing.observations.like(f"{IMPORT_PROVENANCE_PREFIX}%")

        total = self._count(imported)
        today = self._count(imported, PropertyListing.captured_at >= start_of_day)
        from_json = self._count(
            PropertyListing.observations.like(f"{IMPORT_PROVENANCE_PREFIX} JSON%")
        )
        return ImportStats(total_imported=total, imported_today=today, imported_from_json=from_json)

    # ------------------------------------------------------------------
    # Duplicate cleanup
    # ------------------------------------------------------------------

    def find_pending_duplicate_groups(self) -> list[DuplicateGroup]:
        """
        Group pending-review listings by title + price, keeping groups of 2+.

        Ids in each group are ordered oldest first.
        """

        pending = PropertyListing.sale_status == SALE_STATUS_PENDING_REVIEW
        keys_stmt = (
            select(PropertyListing.title, PropertyListing.price)
            .where(pending)
            .group_by(PropertyListing.title, PropertyListing.price)
            .having(func.count(PropertyListing.id) > 1)
            .order_by(PropertyListing.title, PropertyListing.price)
        )
        groups: list[DuplicateGroup] = []
        for title, price in self._session.execute(keys_stmt).all():
            ids_stmt = (
                select(PropertyListing.id)
                .where(pending)
                .where(PropertyListing.title == title)
                .where(PropertyListing.price == price)
                .order_by(
                    PropertyListing.created_at,
                    PropertyListing.captured_at,
                    PropertyListing.id,
                )
            )
            ids = tuple(str(listing_id) for listing_id in self._session.execute(ids_stmt).scalars())
            groups.append(DuplicateGroup(title=title, price=price, listing_ids=ids))
        return groups

    def delete_listings(self, listing_ids: Sequence[str]) -> int:
        """
        Delete listings by id in one transaction; return the number removed.
        """

        if not listing_ids:
            return 0

        ids = [uuid.UUID(listing_id) for listing_id in listing_ids]
        try:
            result = self._session.execute(delete(PropertyListing).where(PropertyListing.id.in_(ids)))
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise ListingPersistenceError("Listings could not be deleted: database error.") from exc
        return int(result.rowcount or 0)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _probe(self, stmt, *, what: str) -> bool:
        try:
            return self._session.execute(stmt).first() is not None
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Listing existence check failed key=%s error=%s", what, exc)
            raise ListingPersistenceError(f"Existence check by {what} failed.") from exc

    def _count(self, *conditions) -> int:
        stmt = select(func.count(PropertyListing.id)).where(*conditions)
        return int(self._session.execute(stmt).scalar_one())

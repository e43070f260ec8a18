"""
db/models/property_listing.py

Real-estate listings created by CSV / JSON imports and reviewed by agents.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class PropertyListing(Base, TimestampMixin):
    __tablename__ = "property_listings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    garage_spaces: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    square_meters: Mapped[int | None] = mapped_column(Integer, nullable=True)
    province: Mapped[str | None] = mapped_column(String(120), nullable=True)
    city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    street_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    property_kind: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Property category, always Vivienda for imports",
    )
    housing_subtype: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Piso, Ático, Dúplex, Chalet, Villa, Masía, Finca, Loft, Casa",
    )
    listing_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    sale_status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Pendiente until an agent reviews the listing",
    )
    reference_url: Mapped[str | None] = mapped_column(String(1000), nullable=True, unique=True)
    contact_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    short_description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    observations: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Import provenance note",
    )
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    captured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        Index("ix_property_listings_title_price", "title", "price"),
        Index("ix_property_listings_sale_status", "sale_status"),
        Index("ix_property_listings_captured_at", "captured_at"),
    )

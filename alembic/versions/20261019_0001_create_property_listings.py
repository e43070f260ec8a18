"""create property_listings table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "property_listings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("rooms", sa.Integer(), nullable=False),
        sa.Column("bathrooms", sa.Integer(), nullable=False),
        sa.Column("garage_spaces", sa.Integer(), nullable=False),
        sa.Column("square_meters", sa.Integer(), nullable=True),
        sa.Column("province", sa.String(length=120), nullable=True),
        sa.Column("city", sa.String(length=255), nullable=True),
        sa.Column("street", sa.String(length=255), nullable=True),
        sa.Column("street_number", sa.String(length=32), nullable=True),
        sa.Column("property_kind", sa.String(length=32), nullable=False),
        sa.Column("housing_subtype", sa.String(length=32), nullable=False),
        sa.Column("listing_type", sa.String(length=32), nullable=True),
        sa.Column("sale_status", sa.String(length=32), nullable=False),
        sa.Column("reference_url", sa.String(length=1000), nullable=True),
        sa.Column("contact_phone", sa.String(length=64), nullable=True),
        sa.Column("contact_name", sa.String(length=255), nullable=True),
        sa.Column("short_description", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("observations", sa.Text(), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.Column("captured_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_property_listings_price_non_negative"),
        sa.PrimaryKeyConstraint("id", name="pk_property_listings"),
        sa.UniqueConstraint("reference_url", name="uq_property_listings_reference_url"),
    )
    op.create_index(
        "ix_property_listings_title_price",
        "property_listings",
        ["title", "price"],
        unique=False,
    )
    op.create_index("ix_property_listings_sale_status", "property_listings", ["sale_status"], unique=False)
    op.create_index("ix_property_listings_captured_at", "property_listings", ["captured_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_property_listings_captured_at", table_name="property_listings")
    op.drop_index("ix_property_listings_sale_status", table_name="property_listings")
    op.drop_index("ix_property_listings_title_price", table_name="property_listings")
    op.drop_table("property_listings")

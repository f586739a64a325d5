"""Initial schema: tenants, inventory, tariffs, customers, bookings and night claims.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Tenants
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_organizations_id", "organizations", ["id"])

    op.create_table(
        "organization_currencies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("code", sa.String(3), nullable=False),
        sa.Column("is_base", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.UniqueConstraint("organization_id", "code", name="uq_org_currency_code"),
    )
    op.create_index("ix_organization_currencies_id", "organization_currencies", ["id"])
    op.create_index("ix_organization_currencies_organization_id", "organization_currencies", ["organization_id"])

    # Inventory
    op.create_table(
        "resource_categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_bookable", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("ix_resource_categories_id", "resource_categories", ["id"])
    op.create_index("ix_resource_categories_code", "resource_categories", ["code"], unique=True)

    op.create_table(
        "resource_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("resource_categories.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("base_rate", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.CheckConstraint("base_rate >= 0", name="check_resource_type_base_rate_non_negative"),
        sa.CheckConstraint("capacity > 0", name="check_resource_type_capacity_positive"),
    )
    op.create_index("ix_resource_types_id", "resource_types", ["id"])
    op.create_index("ix_resource_types_organization_id", "resource_types", ["organization_id"])

    op.create_table(
        "resources",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("branch_id", sa.Integer(), nullable=True),
        sa.Column("resource_type_id", sa.Integer(), sa.ForeignKey("resource_types.id"), nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        sa.Column("floor_zone", sa.String(100), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'available'")),
        *_timestamps(),
    )
    op.create_index("ix_resources_id", "resources", ["id"])
    op.create_index("ix_resources_resource_type_id", "resources", ["resource_type_id"])
    # Availability lists every resource of a tenant's category
    op.create_index("ix_resources_org_type", "resources", ["organization_id", "resource_type_id"])

    op.create_table(
        "resource_blocks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("resource_id", sa.Integer(), sa.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date_from", sa.Date(), nullable=False),
        sa.Column("date_to", sa.Date(), nullable=False),
        sa.Column("block_type", sa.String(20), nullable=False, server_default=sa.text("'other'")),
        sa.Column("reason", sa.String(500), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("date_from <= date_to", name="check_block_dates_ordered"),
    )
    op.create_index("ix_resource_blocks_id", "resource_blocks", ["id"])
    op.create_index("ix_resource_blocks_resource_dates", "resource_blocks", ["resource_id", "date_from", "date_to"])

    op.create_table(
        "tariffs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("resource_type_id", sa.Integer(), sa.ForeignKey("resource_types.id"), nullable=False),
        sa.Column("plan", sa.String(100), nullable=True),
        sa.Column("date_from", sa.Date(), nullable=False),
        sa.Column("date_to", sa.Date(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("date_from <= date_to", name="check_tariff_dates_ordered"),
        sa.CheckConstraint("price >= 0", name="check_tariff_price_non_negative"),
    )
    op.create_index("ix_tariffs_id", "tariffs", ["id"])
    op.create_index(
        "ix_tariffs_lookup", "tariffs", ["organization_id", "resource_type_id", "date_from", "date_to"]
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("document_number", sa.String(50), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_customers_id", "customers", ["id"])
    op.create_index("ix_customers_organization_id", "customers", ["organization_id"])
    op.create_index("ix_customers_email", "customers", ["email"])

    # Bookings
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("branch_id", sa.Integer(), nullable=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("resource_id", sa.Integer(), sa.ForeignKey("resources.id"), nullable=True),
        sa.Column("checkin", sa.Date(), nullable=False),
        sa.Column("checkout", sa.Date(), nullable=False),
        sa.Column("occupant_count", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'confirmed'")),
        sa.Column("channel", sa.String(30), nullable=False, server_default=sa.text("'direct'")),
        sa.Column("total_estimated", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("actual_checkin_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actual_checkout_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("checkin < checkout", name="check_booking_checkin_before_checkout"),
        sa.CheckConstraint("occupant_count > 0", name="check_booking_occupants_positive"),
        sa.CheckConstraint(
            "status IN ('tentative', 'confirmed', 'checked_in', 'checked_out', 'cancelled', 'no_show')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_organization_id", "bookings", ["organization_id"])
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"])
    op.create_index("ix_bookings_resource_id", "bookings", ["resource_id"])
    op.create_index("ix_bookings_org_dates", "bookings", ["organization_id", "checkin", "checkout"])

    op.create_table(
        "booking_resources",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("resource_id", sa.Integer(), sa.ForeignKey("resources.id"), nullable=False),
        sa.Column("checkin", sa.Date(), nullable=False),
        sa.Column("checkout", sa.Date(), nullable=False),
        sa.UniqueConstraint("booking_id", "resource_id", name="uq_booking_resource"),
        sa.CheckConstraint("checkin < checkout", name="check_assignment_checkin_before_checkout"),
    )
    op.create_index("ix_booking_resources_id", "booking_resources", ["id"])
    op.create_index("ix_booking_resources_booking_id", "booking_resources", ["booking_id"])
    op.create_index("ix_booking_resources_resource_id", "booking_resources", ["resource_id"])
    # Conflict detection scans assignments by resource and date range
    op.create_index(
        "ix_booking_resources_resource_dates", "booking_resources", ["resource_id", "checkin", "checkout"]
    )

    # NIGHT CLAIMS: one row per (resource, night) held by a non-cancelled booking.
    # The unique constraint is what rejects a second writer that passed the
    # availability read concurrently with the first.
    op.create_table(
        "resource_nights",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("resource_id", sa.Integer(), sa.ForeignKey("resources.id"), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("night", sa.Date(), nullable=False),
        sa.UniqueConstraint("resource_id", "night", name="uq_resource_night"),
    )
    op.create_index("ix_resource_nights_booking_id", "resource_nights", ["booking_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("method", sa.String(30), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'completed'")),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="check_payment_amount_positive"),
    )
    op.create_index("ix_payments_id", "payments", ["id"])
    op.create_index("ix_payments_booking_id", "payments", ["booking_id"])


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("resource_nights")
    op.drop_table("booking_resources")
    op.drop_table("bookings")
    op.drop_table("customers")
    op.drop_table("tariffs")
    op.drop_table("resource_blocks")
    op.drop_table("resources")
    op.drop_table("resource_types")
    op.drop_table("resource_categories")
    op.drop_table("organization_currencies")
    op.drop_table("organizations")

"""
Booking header, its resource assignments and the per-night claims.

Key design decisions:
- checkin/checkout are calendar dates; a stay occupies the half-open range
  [checkin, checkout), so a resource freed on day D can be re-booked from D
- BookingResource rows are replaced as a full set, never patched
- ResourceNight holds one row per (resource, night) for every non-cancelled
  booking. Its unique constraint is the storage-level guarantee that no two
  live bookings hold the same resource on the same night, which closes the
  check-then-write race between availability reads and inserts
- resource_id on the header is the legacy single-resource binding; it is read
  by availability checks and cleared once the resource set is replaced
"""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin

BOOKING_STATUSES = ("tentative", "confirmed", "checked_in", "checked_out", "cancelled", "no_show")


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    branch_id = Column(Integer, nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    resource_id = Column(Integer, ForeignKey("resources.id"), nullable=True, index=True)
    checkin = Column(Date, nullable=False)
    checkout = Column(Date, nullable=False)
    occupant_count = Column(Integer, nullable=False, default=1)
    status = Column(String(20), nullable=False, default="confirmed")
    channel = Column(String(30), nullable=False, default="direct")
    total_estimated = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    booking_metadata = Column("metadata", JSON, nullable=True)
    actual_checkin_at = Column(DateTime(timezone=True), nullable=True)
    actual_checkout_at = Column(DateTime(timezone=True), nullable=True)

    resources = relationship("BookingResource", back_populates="booking", lazy="selectin")
    payments = relationship("Payment", back_populates="booking", lazy="selectin")

    __table_args__ = (
        CheckConstraint("checkin < checkout", name="check_booking_checkin_before_checkout"),
        CheckConstraint("occupant_count > 0", name="check_booking_occupants_positive"),
        CheckConstraint(
            "status IN ('tentative', 'confirmed', 'checked_in', 'checked_out', 'cancelled', 'no_show')",
            name="check_booking_status",
        ),
        Index("ix_bookings_org_dates", "organization_id", "checkin", "checkout"),
    )

    @property
    def resource_ids(self) -> list[int]:
        ids = [r.resource_id for r in self.resources]
        if self.resource_id is not None and self.resource_id not in ids:
            ids.insert(0, self.resource_id)
        return ids

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, {self.checkin}..{self.checkout}, status={self.status})>"


class BookingResource(Base):
    __tablename__ = "booking_resources"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    resource_id = Column(Integer, ForeignKey("resources.id"), nullable=False, index=True)
    checkin = Column(Date, nullable=False)
    checkout = Column(Date, nullable=False)

    booking = relationship("Booking", back_populates="resources")

    __table_args__ = (
        UniqueConstraint("booking_id", "resource_id", name="uq_booking_resource"),
        CheckConstraint("checkin < checkout", name="check_assignment_checkin_before_checkout"),
        Index("ix_booking_resources_resource_dates", "resource_id", "checkin", "checkout"),
    )


class ResourceNight(Base):
    __tablename__ = "resource_nights"

    id = Column(Integer, primary_key=True)
    resource_id = Column(Integer, ForeignKey("resources.id"), nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    night = Column(Date, nullable=False)

    __table_args__ = (
        # One live booking per resource per night
        UniqueConstraint("resource_id", "night", name="uq_resource_night"),
    )

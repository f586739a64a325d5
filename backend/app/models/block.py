"""
Administrative block: a non-booking hold on a resource.

Blocks are calendar-day holds, so both `date_from` and `date_to` are inclusive.
This is deliberately different from the half-open stay of a booking.
"""

from sqlalchemy import Column, Integer, String, Date, ForeignKey, Index, CheckConstraint

from app.db.base import Base, TimestampMixin

BLOCK_TYPES = ("maintenance", "cleaning", "out_of_order", "reserved", "other")


class AdministrativeBlock(Base, TimestampMixin):
    __tablename__ = "resource_blocks"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    resource_id = Column(Integer, ForeignKey("resources.id", ondelete="CASCADE"), nullable=False)
    date_from = Column(Date, nullable=False)
    date_to = Column(Date, nullable=False)
    block_type = Column(String(20), nullable=False, default="other")
    reason = Column(String(500), nullable=True)

    __table_args__ = (
        CheckConstraint("date_from <= date_to", name="check_block_dates_ordered"),
        Index("ix_resource_blocks_resource_dates", "resource_id", "date_from", "date_to"),
    )

    def __repr__(self) -> str:
        return f"<AdministrativeBlock(resource={self.resource_id}, {self.date_from}..{self.date_to}, type={self.block_type})>"

"""
Tariff: a dynamic, date-sensitive daily price for a resource type.

`plan` is NULL for the default tariff; named plans ("weekend", "corporate")
only apply when the caller asks for them.
"""

from sqlalchemy import Column, Integer, String, Boolean, Date, Numeric, ForeignKey, Index, CheckConstraint

from app.db.base import Base, TimestampMixin


class Tariff(Base, TimestampMixin):
    __tablename__ = "tariffs"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    resource_type_id = Column(Integer, ForeignKey("resource_types.id"), nullable=False)
    plan = Column(String(100), nullable=True)
    date_from = Column(Date, nullable=False)
    date_to = Column(Date, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("date_from <= date_to", name="check_tariff_dates_ordered"),
        CheckConstraint("price >= 0", name="check_tariff_price_non_negative"),
        Index("ix_tariffs_lookup", "organization_id", "resource_type_id", "date_from", "date_to"),
    )

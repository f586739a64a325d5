"""
Bookable inventory: categories, types and the concrete resources.

Key design decisions:
- ResourceCategory is global reference data keyed by `code` ("room", "table", ...)
- ResourceType carries the static base rate used when no tariff applies
- Resource.status is independent of bookings; "maintenance" removes the
  resource from availability listings entirely
"""

from sqlalchemy import Column, Integer, String, Boolean, Numeric, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin

RESOURCE_STATUS_MAINTENANCE = "maintenance"


class ResourceCategory(Base):
    __tablename__ = "resource_categories"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    is_bookable = Column(Boolean, nullable=False, default=True)

    resource_types = relationship("ResourceType", back_populates="category")


class ResourceType(Base, TimestampMixin):
    __tablename__ = "resource_types"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("resource_categories.id"), nullable=False)
    name = Column(String(255), nullable=False)
    base_rate = Column(Numeric(12, 2), nullable=False, default=0)
    capacity = Column(Integer, nullable=False, default=1)

    category = relationship("ResourceCategory", back_populates="resource_types", lazy="joined")
    resources = relationship("Resource", back_populates="resource_type")

    __table_args__ = (
        CheckConstraint("base_rate >= 0", name="check_resource_type_base_rate_non_negative"),
        CheckConstraint("capacity > 0", name="check_resource_type_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<ResourceType(id={self.id}, name={self.name}, base_rate={self.base_rate})>"


class Resource(Base, TimestampMixin):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    branch_id = Column(Integer, nullable=True)
    resource_type_id = Column(Integer, ForeignKey("resource_types.id"), nullable=False, index=True)
    label = Column(String(100), nullable=False)
    floor_zone = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default="available")

    resource_type = relationship("ResourceType", back_populates="resources", lazy="joined")

    __table_args__ = (
        Index("ix_resources_org_type", "organization_id", "resource_type_id"),
    )

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, label={self.label}, status={self.status})>"

"""
Organization (tenant) and its configured currencies.

Both are reference data owned elsewhere; the engine only reads them.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Organization(Base, TimestampMixin):
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    currencies = relationship("OrganizationCurrency", back_populates="organization")

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name})>"


class OrganizationCurrency(Base):
    __tablename__ = "organization_currencies"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    code = Column(String(3), nullable=False)
    is_base = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    organization = relationship("Organization", back_populates="currencies")

    __table_args__ = (
        UniqueConstraint("organization_id", "code", name="uq_org_currency_code"),
    )

"""
Pydantic schemas for price quotes.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class RateSource(str, Enum):
    TARIFF = "tariff"
    BASE_RATE = "base_rate"


class Extra(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(default=1, gt=0)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class PriceQuoteRequest(BaseModel):
    resource_type_id: int
    checkin: date
    checkout: date
    unit_count: int = Field(default=1, gt=0)
    extras: list[Extra] = Field(default_factory=list)
    plan: Optional[str] = Field(None, max_length=100)


class PriceBreakdown(BaseModel):
    resource_type_id: int
    nights: int
    daily_rate: Decimal
    rate_source: RateSource
    tariff_id: Optional[int] = None
    unit_count: int
    accommodation_total: Decimal
    extras_total: Decimal
    total: Decimal

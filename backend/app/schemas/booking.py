"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional
from pydantic import BaseModel, BeforeValidator, Field

BookingStatus = Literal["tentative", "confirmed", "checked_in", "checked_out", "cancelled", "no_show"]


def _calendar_day(value: Any) -> Any:
    """Timestamps (15:00 check-in, 11:00 check-out) collapse to their calendar day."""
    if isinstance(value, str) and len(value) > 10:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        return value.date()
    return value


StayDate = Annotated[date, BeforeValidator(_calendar_day)]


class BookingCreate(BaseModel):
    customer_id: int
    branch_id: Optional[int] = None
    checkin: StayDate
    checkout: StayDate
    occupant_count: int = Field(default=1, gt=0)
    resource_ids: list[int] = Field(..., min_length=1)
    total_estimated: Decimal = Field(default=Decimal("0"), ge=0)
    channel: str = Field(default="direct", max_length=30)
    notes: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    payment_method: Optional[str] = Field(None, max_length=30)
    payment_amount: Optional[Decimal] = Field(None, ge=0)


class BookingUpdate(BaseModel):
    customer_id: Optional[int] = None
    branch_id: Optional[int] = None
    checkin: Optional[StayDate] = None
    checkout: Optional[StayDate] = None
    occupant_count: Optional[int] = Field(None, gt=0)
    resource_ids: Optional[list[int]] = Field(None, min_length=1)
    total_estimated: Optional[Decimal] = Field(None, ge=0)
    channel: Optional[str] = Field(None, max_length=30)
    notes: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResourceResponse(BaseModel):
    resource_id: int
    checkin: date
    checkout: date

    model_config = {"from_attributes": True}


class PaymentResponse(BaseModel):
    id: int
    amount: Decimal
    method: str
    currency: str
    status: str

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    organization_id: int
    branch_id: Optional[int]
    customer_id: int
    checkin: date
    checkout: date
    occupant_count: int
    status: str
    channel: str
    total_estimated: Decimal
    notes: Optional[str]
    # ORM attribute is `booking_metadata`; `metadata` is reserved on models
    metadata: Optional[dict[str, Any]] = Field(None, validation_alias="booking_metadata")
    resources: list[BookingResourceResponse]
    payments: list[PaymentResponse]
    actual_checkin_at: Optional[datetime] = None
    actual_checkout_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingCreateResponse(BookingResponse):
    warnings: list[str] = Field(default_factory=list)

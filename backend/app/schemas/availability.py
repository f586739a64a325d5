"""
Pydantic schemas for availability and occupancy queries.
"""

import datetime
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.booking import StayDate


class ResourceTypeSummary(BaseModel):
    id: int
    name: str
    base_rate: Decimal
    capacity: int

    model_config = {"from_attributes": True}


class BlockSummary(BaseModel):
    id: int
    date_from: date
    date_to: date
    block_type: str
    reason: Optional[str]

    model_config = {"from_attributes": True}


class ResourceAvailability(BaseModel):
    id: int
    label: str
    floor_zone: Optional[str]
    status: str
    resource_type: ResourceTypeSummary
    is_available: bool
    conflicting_bookings: list[int] = Field(default_factory=list)
    blocks: list[BlockSummary] = Field(default_factory=list)


class EditAvailabilityRequest(BaseModel):
    resource_ids: list[int] = Field(..., min_length=1)
    checkin: StayDate
    checkout: StayDate


class EditAvailabilityResponse(BaseModel):
    available: bool
    conflicts: list[int]
    blocked: list[int] = Field(default_factory=list)


class OccupancyDay(BaseModel):
    date: datetime.date
    occupied: int
    total: int
    percentage: int

"""
Availability and occupancy endpoints.

Availability is never cached: it must reflect the latest committed bookings.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_organization_id
from app.db.session import get_db
from app.schemas.availability import OccupancyDay, ResourceAvailability
from app.services.availability_service import get_available_resources, get_occupancy

router = APIRouter(tags=["Availability"])


@router.get("/availability", response_model=list[ResourceAvailability])
async def availability_endpoint(
    category: str = Query(..., min_length=1, description="Resource category code"),
    checkin: date = Query(...),
    checkout: date = Query(...),
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Every non-maintenance resource of the category with an availability
    verdict for [checkin, checkout) and the bookings or blocks behind it.
    """
    return await get_available_resources(db, organization_id, category, checkin, checkout)


@router.get("/occupancy", response_model=list[OccupancyDay])
async def occupancy_endpoint(
    start: date = Query(...),
    end: date = Query(...),
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Occupied resources per day, both ends inclusive."""
    return await get_occupancy(db, organization_id, start, end)

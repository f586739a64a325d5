"""
Booking endpoints. Writes go through the transaction coordinator, which
guarantees a booking either holds all its resources or does not exist.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_organization_id
from app.db.session import get_db
from app.schemas.availability import EditAvailabilityRequest, EditAvailabilityResponse
from app.schemas.booking import (
    BookingCreate,
    BookingCreateResponse,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
)
from app.services.booking_service import (
    check_availability_for_edit,
    create_booking,
    get_booking,
    transition_booking_status,
    update_booking,
)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Book one or more resources for [checkin, checkout).

    Returns 409 when a resource is blocked or already taken, including when a
    concurrent request claims it first. A failed initial payment does not
    fail the request; it is reported in `warnings`.
    """
    creation = await create_booking(db, organization_id, booking_data)
    response = BookingCreateResponse.model_validate(creation.booking)
    response.warnings = creation.warnings
    return response


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking_endpoint(
    booking_id: int,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    return await get_booking(db, organization_id, booking_id)


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking_endpoint(
    booking_id: int,
    booking_data: BookingUpdate,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Update header fields; `resource_ids`, when given, replaces the whole set."""
    return await update_booking(db, organization_id, booking_id, booking_data)


@router.post("/{booking_id}/availability-check", response_model=EditAvailabilityResponse)
async def edit_availability_endpoint(
    booking_id: int,
    request: EditAvailabilityRequest,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Would this booking still fit if moved? Its own rows never count as conflicts."""
    return await check_availability_for_edit(
        db, organization_id, booking_id, request.resource_ids, request.checkin, request.checkout
    )


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def transition_status_endpoint(
    booking_id: int,
    status_update: BookingStatusUpdate,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    return await transition_booking_status(db, organization_id, booking_id, status_update.status)

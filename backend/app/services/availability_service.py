"""
Availability resolver.

Returns the full candidate set for a category with a per-resource verdict
instead of filtering unavailable resources out, so callers can show *why* a
resource cannot be booked (conflicting bookings, administrative blocks).

A resource is unavailable for [checkin, checkout) when any of these overlap:
  1. an assignment row of a non-cancelled booking (half-open)
  2. a non-cancelled booking bound to it directly through bookings.resource_id
     (legacy single-resource bookings, half-open)
  3. an administrative block (inclusive, calendar-day hold)
Resources in "maintenance" status are excluded from the candidate set.
"""

import time
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.block import AdministrativeBlock
from app.models.booking import Booking, BookingResource
from app.models.resource import RESOURCE_STATUS_MAINTENANCE, Resource, ResourceCategory, ResourceType
from app.schemas.availability import (
    BlockSummary,
    OccupancyDay,
    ResourceAvailability,
    ResourceTypeSummary,
)
from app.services.intervals import (
    inclusive_overlap_clause,
    overlap_clause,
    validate_interval,
)
from app.core.exceptions import InvalidInterval, NotFound
from app.core.logging import get_logger
from app.core.metrics import availability_latency

logger = get_logger(__name__)

OCCUPYING_STATUSES = ("confirmed", "checked_in")


async def find_booking_conflicts(
    db: AsyncSession,
    organization_id: int,
    resource_ids: Iterable[int],
    checkin: date,
    checkout: date,
    exclude_booking_id: Optional[int] = None,
) -> dict[int, list[int]]:
    """
    Map resource id -> ids of non-cancelled bookings overlapping [checkin, checkout).
    Resources without conflicts are absent from the result.
    """
    resource_ids = list(resource_ids)
    if not resource_ids:
        return {}

    assigned = (
        select(BookingResource.resource_id, BookingResource.booking_id)
        .join(Booking, Booking.id == BookingResource.booking_id)
        .where(
            Booking.organization_id == organization_id,
            Booking.status != "cancelled",
            BookingResource.resource_id.in_(resource_ids),
            overlap_clause(BookingResource.checkin, BookingResource.checkout, checkin, checkout),
        )
    )
    direct = select(Booking.resource_id, Booking.id).where(
        Booking.organization_id == organization_id,
        Booking.status != "cancelled",
        Booking.resource_id.in_(resource_ids),
        overlap_clause(Booking.checkin, Booking.checkout, checkin, checkout),
    )
    if exclude_booking_id is not None:
        assigned = assigned.where(BookingResource.booking_id != exclude_booking_id)
        direct = direct.where(Booking.id != exclude_booking_id)

    conflicts: dict[int, list[int]] = defaultdict(list)
    for query in (assigned, direct):
        for resource_id, booking_id in (await db.execute(query)).all():
            if booking_id not in conflicts[resource_id]:
                conflicts[resource_id].append(booking_id)
    return dict(conflicts)


async def find_blocks(
    db: AsyncSession,
    organization_id: int,
    resource_ids: Iterable[int],
    checkin: date,
    checkout: date,
) -> dict[int, list[AdministrativeBlock]]:
    """Map resource id -> blocks whose [date_from, date_to] touches [checkin, checkout]."""
    resource_ids = list(resource_ids)
    if not resource_ids:
        return {}

    result = await db.execute(
        select(AdministrativeBlock)
        .where(
            AdministrativeBlock.organization_id == organization_id,
            AdministrativeBlock.resource_id.in_(resource_ids),
            inclusive_overlap_clause(AdministrativeBlock.date_from, AdministrativeBlock.date_to, checkin, checkout),
        )
        .order_by(AdministrativeBlock.date_from.asc(), AdministrativeBlock.id.asc())
    )
    blocks: dict[int, list[AdministrativeBlock]] = defaultdict(list)
    for block in result.scalars().all():
        blocks[block.resource_id].append(block)
    return dict(blocks)


async def get_available_resources(
    db: AsyncSession,
    organization_id: int,
    category_code: str,
    checkin: date,
    checkout: date,
) -> list[ResourceAvailability]:
    checkin, checkout = validate_interval(checkin, checkout)
    started = time.perf_counter()

    category = (
        await db.execute(select(ResourceCategory).where(ResourceCategory.code == category_code))
    ).scalar_one_or_none()
    if not category:
        raise NotFound("ResourceCategory", category_code)

    result = await db.execute(
        select(Resource)
        .join(ResourceType, ResourceType.id == Resource.resource_type_id)
        .where(
            Resource.organization_id == organization_id,
            ResourceType.category_id == category.id,
            Resource.status != RESOURCE_STATUS_MAINTENANCE,
        )
        .order_by(Resource.label.asc(), Resource.id.asc())
    )
    resources = list(result.scalars().unique().all())
    ids = [r.id for r in resources]

    conflicts = await find_booking_conflicts(db, organization_id, ids, checkin, checkout)
    blocks = await find_blocks(db, organization_id, ids, checkin, checkout)

    annotated = [
        ResourceAvailability(
            id=resource.id,
            label=resource.label,
            floor_zone=resource.floor_zone,
            status=resource.status,
            resource_type=ResourceTypeSummary.model_validate(resource.resource_type),
            is_available=resource.id not in conflicts and resource.id not in blocks,
            conflicting_bookings=conflicts.get(resource.id, []),
            blocks=[BlockSummary.model_validate(b) for b in blocks.get(resource.id, [])],
        )
        for resource in resources
    ]

    availability_latency.observe(time.perf_counter() - started)
    logger.info(
        "availability_resolved",
        organization_id=organization_id,
        category=category_code,
        candidates=len(annotated),
        available=sum(1 for r in annotated if r.is_available),
    )
    return annotated


async def get_occupancy(
    db: AsyncSession,
    organization_id: int,
    start: date,
    end: date,
) -> list[OccupancyDay]:
    """Occupied resources per day in [start, end], counting confirmed and checked-in stays."""
    if end < start:
        raise InvalidInterval(start, end)

    total = (
        await db.execute(
            select(func.count(Resource.id)).where(Resource.organization_id == organization_id)
        )
    ).scalar() or 0
    if total == 0:
        return []

    window_end = end + timedelta(days=1)
    stays = (
        select(BookingResource.resource_id, BookingResource.checkin, BookingResource.checkout)
        .join(Booking, Booking.id == BookingResource.booking_id)
        .where(
            Booking.organization_id == organization_id,
            Booking.status.in_(OCCUPYING_STATUSES),
            overlap_clause(BookingResource.checkin, BookingResource.checkout, start, window_end),
        )
    )
    legacy = select(Booking.resource_id, Booking.checkin, Booking.checkout).where(
        Booking.organization_id == organization_id,
        Booking.status.in_(OCCUPYING_STATUSES),
        Booking.resource_id.is_not(None),
        overlap_clause(Booking.checkin, Booking.checkout, start, window_end),
    )

    occupied: dict[date, set[int]] = {}
    day = start
    while day <= end:
        occupied[day] = set()
        day += timedelta(days=1)

    for query in (stays, legacy):
        for resource_id, checkin, checkout in (await db.execute(query)).all():
            day = max(checkin, start)
            while day < checkout and day <= end:
                occupied[day].add(resource_id)
                day += timedelta(days=1)

    return [
        OccupancyDay(
            date=day,
            occupied=len(resources),
            total=total,
            percentage=round(len(resources) / total * 100),
        )
        for day, resources in sorted(occupied.items())
    ]

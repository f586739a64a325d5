"""
Booking transaction coordinator.

CONSISTENCY STRATEGY: Saga + Storage Constraint
===============================================

Problem:
  A booking spans several tables (header, resource assignments, payment) and
  availability is "check then write": two requests for the same resource and
  overlapping dates can both pass the availability read before either commits.

Solution:
  1. Pre-checks, in order, before any write:
       interval is valid -> customer and resources exist -> no administrative
       block overlaps (inclusive) -> no live booking overlaps (half-open)
  2. A two-step saga, each step committed on its own:
       insert_header      compensated by deleting the header and its children
       assign_resources   booking_resources rows + one resource_nights row per
                          (resource, night)
  3. Best-effort initial payment. A failure is logged and reported as a
     warning; the booking stands.

  The resource_nights UNIQUE(resource_id, night) constraint is the final
  authority. If a concurrent writer claimed a night between our pre-check and
  our insert, the IntegrityError is turned into ResourceConflict and the saga
  removes our header before the error reaches the caller.

  Optionally, writers are serialized per resource through the configured
  ResourceLockStrategy (see strategy_factory) to reject contention early.
"""

import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking, BookingResource, ResourceNight
from app.models.payment import Payment
from app.models.resource import RESOURCE_STATUS_MAINTENANCE, Resource
from app.schemas.booking import BookingCreate, BookingUpdate
from app.services import availability_service, currency_service, customer_service
from app.services.intervals import iter_nights, validate_interval
from app.services.saga import Saga
from app.services.strategy_factory import get_resource_lock
from app.core.exceptions import (
    BookingNotEditable,
    InvalidInterval,
    InvalidStatusTransition,
    NotFound,
    PaymentRecordingFailed,
    ResourceBlocked,
    ResourceConflict,
)
from app.core.logging import get_logger
from app.core.metrics import (
    booking_latency,
    payment_recording_failures,
    record_booking_attempt,
    record_lock_request,
)

logger = get_logger(__name__)

ALLOWED_TRANSITIONS = {
    "tentative": {"confirmed", "cancelled"},
    "confirmed": {"checked_in", "cancelled", "no_show"},
    "checked_in": {"checked_out"},
}
TERMINAL_STATUSES = ("checked_out", "cancelled", "no_show")

HEADER_FIELDS = ("customer_id", "branch_id", "occupant_count", "total_estimated", "channel", "notes")
NULLABLE_HEADER_FIELDS = ("branch_id", "notes")


@dataclass
class BookingCreation:
    booking: Booking
    warnings: list[str] = field(default_factory=list)


def _unique(ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(ids))


async def get_booking(db: AsyncSession, organization_id: int, booking_id: int) -> Booking:
    """Load a booking with its assignments and payments."""
    result = await db.execute(
        select(Booking)
        .where(
            Booking.id == booking_id,
            Booking.organization_id == organization_id,
        )
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFound("Booking", booking_id)
    return booking


async def _load_resources(db: AsyncSession, organization_id: int, resource_ids: list[int]) -> list[Resource]:
    result = await db.execute(
        select(Resource).where(
            Resource.id.in_(resource_ids),
            Resource.organization_id == organization_id,
        )
    )
    resources = {r.id: r for r in result.scalars().unique().all()}
    for resource_id in resource_ids:
        if resource_id not in resources:
            raise NotFound("Resource", resource_id)
    return [resources[resource_id] for resource_id in resource_ids]


async def _ensure_not_blocked(
    db: AsyncSession,
    organization_id: int,
    resources: list[Resource],
    checkin: date,
    checkout: date,
) -> None:
    for resource in resources:
        if resource.status == RESOURCE_STATUS_MAINTENANCE:
            raise ResourceBlocked(resource.id, RESOURCE_STATUS_MAINTENANCE, "Resource is under maintenance")

    blocks = await availability_service.find_blocks(
        db, organization_id, [r.id for r in resources], checkin, checkout
    )
    for resource in resources:
        if resource.id in blocks:
            block = blocks[resource.id][0]
            logger.warning(
                "booking_rejected_blocked",
                resource_id=resource.id,
                block_id=block.id,
                block_type=block.block_type,
            )
            raise ResourceBlocked(resource.id, block.block_type, block.reason)


async def _ensure_no_conflicts(
    db: AsyncSession,
    organization_id: int,
    resource_ids: list[int],
    checkin: date,
    checkout: date,
    exclude_booking_id: Optional[int] = None,
) -> None:
    conflicts = await availability_service.find_booking_conflicts(
        db, organization_id, resource_ids, checkin, checkout, exclude_booking_id=exclude_booking_id
    )
    if conflicts:
        logger.warning(
            "booking_rejected_conflict",
            resource_ids=sorted(conflicts),
            bookings=sorted({b for ids in conflicts.values() for b in ids}),
            stage="pre_check",
        )
        raise ResourceConflict(conflicts.keys())


async def _claimed_by_others(
    db: AsyncSession,
    booking_id: int,
    resource_ids: list[int],
    checkin: date,
    checkout: date,
) -> list[int]:
    result = await db.execute(
        select(ResourceNight.resource_id)
        .where(
            ResourceNight.resource_id.in_(resource_ids),
            ResourceNight.night >= checkin,
            ResourceNight.night < checkout,
            ResourceNight.booking_id != booking_id,
        )
        .distinct()
    )
    return list(result.scalars().all())


def _assignment_rows(booking_id: int, resource_ids: list[int], checkin: date, checkout: date) -> list:
    rows: list = []
    for resource_id in resource_ids:
        rows.append(
            BookingResource(booking_id=booking_id, resource_id=resource_id, checkin=checkin, checkout=checkout)
        )
        rows.extend(
            ResourceNight(resource_id=resource_id, booking_id=booking_id, night=night)
            for night in iter_nights(checkin, checkout)
        )
    return rows


async def _commit_claims(
    db: AsyncSession,
    booking_id: int,
    resource_ids: list[int],
    checkin: date,
    checkout: date,
) -> None:
    """Commit pending claim rows; a unique violation becomes ResourceConflict."""
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        conflicts = await _claimed_by_others(db, booking_id, resource_ids, checkin, checkout)
        if not conflicts:
            raise
        logger.warning(
            "booking_rejected_conflict",
            booking_id=booking_id,
            resource_ids=sorted(conflicts),
            stage="insert",
        )
        raise ResourceConflict(conflicts) from None


async def write_resource_assignments(
    db: AsyncSession,
    booking_id: int,
    resource_ids: list[int],
    checkin: date,
    checkout: date,
) -> None:
    db.add_all(_assignment_rows(booking_id, resource_ids, checkin, checkout))
    await _commit_claims(db, booking_id, resource_ids, checkin, checkout)


async def record_initial_payment(
    db: AsyncSession,
    organization_id: int,
    booking_id: int,
    method: str,
    amount: Decimal,
) -> Payment:
    currency = await currency_service.get_base_currency(db, organization_id)
    payment = Payment(
        organization_id=organization_id,
        booking_id=booking_id,
        amount=amount,
        method=method,
        currency=currency,
        status="completed",
    )
    db.add(payment)
    await db.flush()
    payment_id = payment.id
    await db.commit()

    logger.info("payment_recorded", booking_id=booking_id, payment_id=payment_id, amount=str(amount), currency=currency)
    return payment


async def _remove_booking(db: AsyncSession, booking_id: int) -> None:
    """Compensation for insert_header: drop the header and anything hanging off it."""
    await db.rollback()
    await db.execute(delete(ResourceNight).where(ResourceNight.booking_id == booking_id))
    await db.execute(delete(BookingResource).where(BookingResource.booking_id == booking_id))
    await db.execute(delete(Booking).where(Booking.id == booking_id))
    await db.commit()
    logger.warning("booking_compensated", booking_id=booking_id)


async def _run_creation_saga(
    db: AsyncSession,
    organization_id: int,
    data: BookingCreate,
    resource_ids: list[int],
    checkin: date,
    checkout: date,
) -> int:
    async def insert_header() -> int:
        booking = Booking(
            organization_id=organization_id,
            branch_id=data.branch_id,
            customer_id=data.customer_id,
            checkin=checkin,
            checkout=checkout,
            occupant_count=data.occupant_count,
            status="confirmed",
            channel=data.channel,
            total_estimated=data.total_estimated,
            notes=data.notes,
            booking_metadata=data.metadata,
        )
        db.add(booking)
        try:
            await db.flush()
            booking_id = booking.id
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return booking_id

    saga = Saga("create_booking")
    saga.add_step("insert_header", insert_header, compensation=lambda booking_id: _remove_booking(db, booking_id))
    saga.add_step(
        "assign_resources",
        lambda: write_resource_assignments(db, saga.results["insert_header"], resource_ids, checkin, checkout),
    )
    results = await saga.run()
    return results["insert_header"]


async def _create_booking(db: AsyncSession, organization_id: int, data: BookingCreate) -> BookingCreation:
    checkin, checkout = validate_interval(data.checkin, data.checkout)
    resource_ids = _unique(data.resource_ids)

    await customer_service.get_customer(db, organization_id, data.customer_id)
    resources = await _load_resources(db, organization_id, resource_ids)

    lock = get_resource_lock()
    token = await lock.acquire(resource_ids)
    record_lock_request(token is not None)
    if token is None:
        logger.info("resource_lock_rejected", resource_ids=resource_ids)
        raise ResourceConflict(
            resource_ids, "Another booking for these resources is in progress, please retry"
        )

    try:
        await _ensure_not_blocked(db, organization_id, resources, checkin, checkout)
        await _ensure_no_conflicts(db, organization_id, resource_ids, checkin, checkout)
        booking_id = await _run_creation_saga(db, organization_id, data, resource_ids, checkin, checkout)
    finally:
        await lock.release(resource_ids, token)

    warnings: list[str] = []
    if data.payment_method and data.payment_amount and data.payment_amount > 0:
        try:
            await record_initial_payment(db, organization_id, booking_id, data.payment_method, data.payment_amount)
        except Exception as exc:
            await db.rollback()
            failure = PaymentRecordingFailed(booking_id, exc)
            payment_recording_failures.inc()
            logger.warning("payment_recording_failed", booking_id=booking_id, error=str(exc))
            warnings.append(str(failure))

    booking = await get_booking(db, organization_id, booking_id)
    logger.info(
        "booking_created",
        booking_id=booking_id,
        organization_id=organization_id,
        resource_ids=resource_ids,
        checkin=str(checkin),
        checkout=str(checkout),
        warnings=len(warnings),
    )
    return BookingCreation(booking=booking, warnings=warnings)


async def create_booking(db: AsyncSession, organization_id: int, data: BookingCreate) -> BookingCreation:
    """
    Create a confirmed booking holding every requested resource for
    [checkin, checkout). Raises InvalidInterval, NotFound, ResourceBlocked
    or ResourceConflict without leaving a header behind.
    """
    started = time.perf_counter()
    try:
        creation = await _create_booking(db, organization_id, data)
    except InvalidInterval:
        record_booking_attempt("invalid")
        raise
    except ResourceBlocked:
        record_booking_attempt("blocked")
        raise
    except ResourceConflict:
        record_booking_attempt("conflict")
        raise
    except Exception:
        record_booking_attempt("error")
        raise
    finally:
        booking_latency.observe(time.perf_counter() - started)
    record_booking_attempt("success")
    return creation


async def update_booking(
    db: AsyncSession,
    organization_id: int,
    booking_id: int,
    data: BookingUpdate,
) -> Booking:
    """
    Update header fields and replace the resource set wholesale.
    Conflict detection ignores the booking's own rows.
    """
    booking = await get_booking(db, organization_id, booking_id)
    if booking.status in TERMINAL_STATUSES:
        raise BookingNotEditable(booking_id, booking.status)

    changes = data.model_dump(exclude_unset=True)
    checkin, checkout = validate_interval(
        changes.get("checkin") or booking.checkin,
        changes.get("checkout") or booking.checkout,
    )
    resource_ids = _unique(changes.get("resource_ids") or booking.resource_ids)
    stay_changed = (
        checkin != booking.checkin
        or checkout != booking.checkout
        or set(resource_ids) != set(booking.resource_ids)
    )

    if changes.get("customer_id") is not None:
        await customer_service.get_customer(db, organization_id, changes["customer_id"])
    resources = await _load_resources(db, organization_id, resource_ids)

    lock = get_resource_lock()
    token = await lock.acquire(resource_ids)
    record_lock_request(token is not None)
    if token is None:
        raise ResourceConflict(
            resource_ids, "Another booking for these resources is in progress, please retry"
        )

    try:
        if stay_changed:
            await _ensure_not_blocked(db, organization_id, resources, checkin, checkout)
        await _ensure_no_conflicts(
            db, organization_id, resource_ids, checkin, checkout, exclude_booking_id=booking_id
        )

        for name in HEADER_FIELDS:
            if name not in changes:
                continue
            if changes[name] is None and name not in NULLABLE_HEADER_FIELDS:
                continue
            setattr(booking, name, changes[name])
        if "metadata" in changes:
            booking.booking_metadata = changes["metadata"]
        booking.checkin = checkin
        booking.checkout = checkout
        # The legacy direct binding is folded into the assignment set
        booking.resource_id = None

        await db.execute(delete(ResourceNight).where(ResourceNight.booking_id == booking_id))
        await db.execute(delete(BookingResource).where(BookingResource.booking_id == booking_id))
        db.add_all(_assignment_rows(booking_id, resource_ids, checkin, checkout))
        await _commit_claims(db, booking_id, resource_ids, checkin, checkout)
    finally:
        await lock.release(resource_ids, token)

    logger.info(
        "booking_updated",
        booking_id=booking_id,
        resource_ids=resource_ids,
        checkin=str(checkin),
        checkout=str(checkout),
    )
    return await get_booking(db, organization_id, booking_id)


async def check_availability_for_edit(
    db: AsyncSession,
    organization_id: int,
    booking_id: int,
    resource_ids: list[int],
    checkin: date,
    checkout: date,
) -> dict:
    """
    Would the booking fit on these resources and dates? Its own rows never
    conflict. Resources under maintenance or covered by a block are reported
    in `blocked`, the same way update_booking would reject them.
    """
    await get_booking(db, organization_id, booking_id)
    checkin, checkout = validate_interval(checkin, checkout)
    resource_ids = _unique(resource_ids)
    resources = await _load_resources(db, organization_id, resource_ids)

    conflicts = await availability_service.find_booking_conflicts(
        db, organization_id, resource_ids, checkin, checkout, exclude_booking_id=booking_id
    )
    blocks = await availability_service.find_blocks(db, organization_id, resource_ids, checkin, checkout)
    blocked = {r.id for r in resources if r.status == RESOURCE_STATUS_MAINTENANCE} | set(blocks)
    return {
        "available": not conflicts and not blocked,
        "conflicts": sorted(conflicts),
        "blocked": sorted(blocked),
    }


async def transition_booking_status(
    db: AsyncSession,
    organization_id: int,
    booking_id: int,
    new_status: str,
) -> Booking:
    """
    Move a booking through its lifecycle. Cancelling releases its nights;
    no transition ever claims new ones.
    """
    booking = await get_booking(db, organization_id, booking_id)
    current = booking.status
    if new_status == current:
        return booking
    if new_status not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidStatusTransition(current, new_status)

    booking.status = new_status
    now = datetime.now(timezone.utc)
    if new_status == "checked_in":
        booking.actual_checkin_at = now
    elif new_status == "checked_out":
        booking.actual_checkout_at = now
    elif new_status == "cancelled":
        await db.execute(delete(ResourceNight).where(ResourceNight.booking_id == booking_id))
    await db.commit()

    logger.info("booking_status_changed", booking_id=booking_id, previous=current, status=new_status)
    return await get_booking(db, organization_id, booking_id)

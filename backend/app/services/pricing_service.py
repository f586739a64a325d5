"""
Rate calculator.

A stay is priced from one of two sources, reported on the result:
  - "tariff": an active tariff row for the resource type whose date range
    covers every night of the stay (checkin .. checkout - 1 day)
  - "base_rate": the resource type's static rate, when no tariff applies

total = nights * daily_rate * unit_count + sum(extra.price * extra.quantity)
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.resource import ResourceType
from app.models.tariff import Tariff
from app.schemas.pricing import Extra, PriceBreakdown, RateSource
from app.services.intervals import count_nights, validate_interval
from app.core.exceptions import NotFound
from app.core.logging import get_logger

logger = get_logger(__name__)


async def resolve_tariff(
    db: AsyncSession,
    organization_id: int,
    resource_type_id: int,
    checkin: date,
    checkout: date,
    plan: Optional[str] = None,
) -> Optional[Tariff]:
    """Most recently starting active tariff covering the whole stay, if any."""
    last_night = checkout - timedelta(days=1)
    query = select(Tariff).where(
        Tariff.organization_id == organization_id,
        Tariff.resource_type_id == resource_type_id,
        Tariff.is_active.is_(True),
        Tariff.date_from <= checkin,
        Tariff.date_to >= last_night,
    )
    if plan:
        query = query.where(Tariff.plan == plan)
    else:
        query = query.where(Tariff.plan.is_(None))

    result = await db.execute(query.order_by(Tariff.date_from.desc(), Tariff.id.desc()).limit(1))
    return result.scalar_one_or_none()


async def calculate_price(
    db: AsyncSession,
    organization_id: int,
    resource_type_id: int,
    checkin: date,
    checkout: date,
    unit_count: int = 1,
    extras: Optional[Sequence[Extra]] = None,
    plan: Optional[str] = None,
) -> PriceBreakdown:
    checkin, checkout = validate_interval(checkin, checkout)
    nights = count_nights(checkin, checkout)

    result = await db.execute(
        select(ResourceType).where(
            ResourceType.id == resource_type_id,
            ResourceType.organization_id == organization_id,
        )
    )
    resource_type = result.scalar_one_or_none()
    if not resource_type:
        raise NotFound("ResourceType", resource_type_id)

    tariff = await resolve_tariff(db, organization_id, resource_type_id, checkin, checkout, plan)
    if tariff is not None:
        daily_rate, source = Decimal(tariff.price), RateSource.TARIFF
    else:
        daily_rate, source = Decimal(resource_type.base_rate), RateSource.BASE_RATE

    accommodation = daily_rate * nights * unit_count
    extras_total = sum((extra.subtotal for extra in extras or ()), Decimal("0"))

    logger.debug(
        "price_calculated",
        resource_type_id=resource_type_id,
        nights=nights,
        rate_source=source.value,
        daily_rate=str(daily_rate),
    )
    return PriceBreakdown(
        resource_type_id=resource_type_id,
        nights=nights,
        daily_rate=daily_rate,
        rate_source=source,
        tariff_id=tariff.id if tariff is not None else None,
        unit_count=unit_count,
        accommodation_total=accommodation,
        extras_total=extras_total,
        total=accommodation + extras_total,
    )

"""
Tests for the rate calculator.
"""

from datetime import date
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidInterval, NotFound
from app.models import ResourceType, Tariff
from app.schemas.pricing import Extra, RateSource
from app.services.pricing_service import calculate_price


async def add_tariff(db: AsyncSession, resource_type: ResourceType, date_from, date_to, price, plan=None):
    tariff = Tariff(
        organization_id=resource_type.organization_id,
        resource_type_id=resource_type.id,
        plan=plan,
        date_from=date_from,
        date_to=date_to,
        price=Decimal(price),
        is_active=True,
    )
    db.add(tariff)
    await db.commit()
    return tariff


@pytest.mark.asyncio
async def test_single_night_costs_one_daily_rate(db_session: AsyncSession, room_type: ResourceType):
    quote = await calculate_price(db_session, 1, room_type.id, date(2026, 3, 1), date(2026, 3, 2))

    assert quote.nights == 1
    assert quote.rate_source == RateSource.BASE_RATE
    assert quote.total == Decimal("100")


@pytest.mark.asyncio
async def test_total_includes_units_and_extras(db_session: AsyncSession, room_type: ResourceType):
    quote = await calculate_price(
        db_session,
        1,
        room_type.id,
        date(2026, 3, 1),
        date(2026, 3, 4),
        unit_count=2,
        extras=[Extra(name="Breakfast", price=Decimal("15"), quantity=2), Extra(name="Parking", price=Decimal("10"))],
    )

    assert quote.nights == 3
    assert quote.accommodation_total == Decimal("600")
    assert quote.extras_total == Decimal("40")
    assert quote.total == Decimal("640")


@pytest.mark.asyncio
async def test_covering_tariff_wins_over_base_rate(db_session: AsyncSession, room_type: ResourceType):
    tariff = await add_tariff(db_session, room_type, date(2026, 3, 1), date(2026, 3, 31), "150")

    quote = await calculate_price(db_session, 1, room_type.id, date(2026, 3, 10), date(2026, 3, 12))

    assert quote.rate_source == RateSource.TARIFF
    assert quote.tariff_id == tariff.id
    assert quote.total == Decimal("300")


@pytest.mark.asyncio
async def test_tariff_must_cover_every_night(db_session: AsyncSession, room_type: ResourceType):
    await add_tariff(db_session, room_type, date(2026, 3, 1), date(2026, 3, 31), "150")

    # Last night is 04-01, outside the tariff
    spanning = await calculate_price(db_session, 1, room_type.id, date(2026, 3, 30), date(2026, 4, 2))
    # Checkout day itself is not a night
    inside = await calculate_price(db_session, 1, room_type.id, date(2026, 3, 30), date(2026, 4, 1))

    assert spanning.rate_source == RateSource.BASE_RATE
    assert spanning.total == Decimal("300")
    assert inside.rate_source == RateSource.TARIFF
    assert inside.total == Decimal("300")


@pytest.mark.asyncio
async def test_plan_selects_its_own_tariff(db_session: AsyncSession, room_type: ResourceType):
    await add_tariff(db_session, room_type, date(2026, 3, 1), date(2026, 3, 31), "150")
    await add_tariff(db_session, room_type, date(2026, 3, 1), date(2026, 3, 31), "120", plan="corporate")

    rack = await calculate_price(db_session, 1, room_type.id, date(2026, 3, 10), date(2026, 3, 11))
    corporate = await calculate_price(
        db_session, 1, room_type.id, date(2026, 3, 10), date(2026, 3, 11), plan="corporate"
    )
    unknown_plan = await calculate_price(
        db_session, 1, room_type.id, date(2026, 3, 10), date(2026, 3, 11), plan="promo"
    )

    assert rack.daily_rate == Decimal("150")
    assert corporate.daily_rate == Decimal("120")
    assert unknown_plan.rate_source == RateSource.BASE_RATE


@pytest.mark.asyncio
async def test_most_recent_tariff_wins(db_session: AsyncSession, room_type: ResourceType):
    await add_tariff(db_session, room_type, date(2026, 1, 1), date(2026, 12, 31), "150")
    await add_tariff(db_session, room_type, date(2026, 3, 1), date(2026, 3, 31), "180")

    quote = await calculate_price(db_session, 1, room_type.id, date(2026, 3, 10), date(2026, 3, 11))

    assert quote.daily_rate == Decimal("180")


@pytest.mark.asyncio
async def test_empty_interval_is_rejected(db_session: AsyncSession, room_type: ResourceType):
    with pytest.raises(InvalidInterval):
        await calculate_price(db_session, 1, room_type.id, date(2026, 3, 1), date(2026, 3, 1))


@pytest.mark.asyncio
async def test_unknown_resource_type(db_session: AsyncSession, room_type: ResourceType):
    with pytest.raises(NotFound):
        await calculate_price(db_session, 1, room_type.id + 99, date(2026, 3, 1), date(2026, 3, 2))


@pytest.mark.asyncio
async def test_resource_type_of_other_tenant_is_hidden(db_session: AsyncSession, room_type: ResourceType):
    with pytest.raises(NotFound):
        await calculate_price(db_session, 2, room_type.id, date(2026, 3, 1), date(2026, 3, 2))


@pytest.mark.asyncio
async def test_quote_endpoint(client: AsyncClient, org_headers, room_type: ResourceType):
    response = await client.post(
        "/api/v1/pricing/quote",
        json={
            "resource_type_id": room_type.id,
            "checkin": "2026-03-01",
            "checkout": "2026-03-03",
            "extras": [{"name": "Late checkout", "price": "25.00"}],
        },
        headers=org_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["nights"] == 2
    assert data["rate_source"] == "base_rate"
    assert Decimal(data["total"]) == Decimal("225")


@pytest.mark.asyncio
async def test_quote_endpoint_rejects_empty_interval(client: AsyncClient, org_headers, room_type: ResourceType):
    response = await client.post(
        "/api/v1/pricing/quote",
        json={"resource_type_id": room_type.id, "checkin": "2026-03-01", "checkout": "2026-03-01"},
        headers=org_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_interval"


@pytest.mark.asyncio
async def test_missing_tenant_header(client: AsyncClient, room_type: ResourceType):
    response = await client.post(
        "/api/v1/pricing/quote",
        json={"resource_type_id": room_type.id, "checkin": "2026-03-01", "checkout": "2026-03-02"},
    )

    assert response.status_code == 422

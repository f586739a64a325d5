"""
Tests for availability resolution and occupancy.
"""

from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidInterval, NotFound
from app.models import AdministrativeBlock, Booking, Customer, Resource
from app.services.availability_service import get_available_resources, get_occupancy


async def book(client: AsyncClient, org_headers, payload) -> dict:
    response = await client.post("/api/v1/bookings/", json=payload, headers=org_headers)
    assert response.status_code == 201, response.text
    return response.json()


def by_label(resources) -> dict:
    return {r["label"]: r for r in resources}


@pytest.mark.asyncio
async def test_all_free_resources_are_available(client: AsyncClient, org_headers, rooms):
    response = await client.get(
        "/api/v1/availability",
        params={"category": "room", "checkin": "2026-03-01", "checkout": "2026-03-05"},
        headers=org_headers,
    )

    assert response.status_code == 200
    data = response.json()
    # 103 is under maintenance and never offered
    assert [r["label"] for r in data] == ["101", "102"]
    assert all(r["is_available"] for r in data)
    assert data[0]["resource_type"]["name"] == "Double"


@pytest.mark.asyncio
async def test_booked_resource_reports_its_conflict(client: AsyncClient, org_headers, rooms, booking_payload):
    booking = await book(client, org_headers, booking_payload("2026-03-01", "2026-03-05"))

    response = await client.get(
        "/api/v1/availability",
        params={"category": "room", "checkin": "2026-03-03", "checkout": "2026-03-07"},
        headers=org_headers,
    )

    data = by_label(response.json())
    assert data["101"]["is_available"] is False
    assert data["101"]["conflicting_bookings"] == [booking["id"]]
    assert data["102"]["is_available"] is True


@pytest.mark.asyncio
async def test_checkout_day_is_available(client: AsyncClient, org_headers, rooms, booking_payload):
    await book(client, org_headers, booking_payload("2026-03-01", "2026-03-05"))

    response = await client.get(
        "/api/v1/availability",
        params={"category": "room", "checkin": "2026-03-05", "checkout": "2026-03-08"},
        headers=org_headers,
    )

    assert by_label(response.json())["101"]["is_available"] is True


@pytest.mark.asyncio
async def test_blocked_resource_is_unavailable(
    client: AsyncClient, org_headers, db_session: AsyncSession, rooms: list[Resource]
):
    db_session.add(
        AdministrativeBlock(
            organization_id=1,
            resource_id=rooms[1].id,
            date_from=date(2026, 4, 10),
            date_to=date(2026, 4, 12),
            block_type="cleaning",
            reason="Deep clean",
        )
    )
    await db_session.commit()

    response = await client.get(
        "/api/v1/availability",
        params={"category": "room", "checkin": "2026-04-12", "checkout": "2026-04-15"},
        headers=org_headers,
    )

    room = by_label(response.json())["102"]
    assert room["is_available"] is False
    assert room["conflicting_bookings"] == []
    assert room["blocks"][0]["block_type"] == "cleaning"


@pytest.mark.asyncio
async def test_cancelled_bookings_do_not_conflict(client: AsyncClient, org_headers, rooms, booking_payload):
    booking = await book(client, org_headers, booking_payload("2026-03-01", "2026-03-05"))
    await client.patch(
        f"/api/v1/bookings/{booking['id']}/status", json={"status": "cancelled"}, headers=org_headers
    )

    response = await client.get(
        "/api/v1/availability",
        params={"category": "room", "checkin": "2026-03-01", "checkout": "2026-03-05"},
        headers=org_headers,
    )

    assert by_label(response.json())["101"]["is_available"] is True


@pytest.mark.asyncio
async def test_legacy_direct_binding_conflicts(
    db_session: AsyncSession, rooms: list[Resource], customer: Customer
):
    legacy = Booking(
        organization_id=1,
        customer_id=customer.id,
        resource_id=rooms[1].id,
        checkin=date(2026, 3, 1),
        checkout=date(2026, 3, 4),
        status="confirmed",
    )
    db_session.add(legacy)
    await db_session.commit()

    result = await get_available_resources(db_session, 1, "room", date(2026, 3, 3), date(2026, 3, 6))

    room = next(r for r in result if r.id == rooms[1].id)
    assert room.is_available is False
    assert room.conflicting_bookings == [legacy.id]


@pytest.mark.asyncio
async def test_availability_is_idempotent(db_session: AsyncSession, rooms):
    first = await get_available_resources(db_session, 1, "room", date(2026, 3, 1), date(2026, 3, 2))
    second = await get_available_resources(db_session, 1, "room", date(2026, 3, 1), date(2026, 3, 2))

    assert first == second


@pytest.mark.asyncio
async def test_other_tenant_sees_nothing(db_session: AsyncSession, rooms):
    assert await get_available_resources(db_session, 2, "room", date(2026, 3, 1), date(2026, 3, 2)) == []


@pytest.mark.asyncio
async def test_unknown_category(db_session: AsyncSession, rooms):
    with pytest.raises(NotFound):
        await get_available_resources(db_session, 1, "cabin", date(2026, 3, 1), date(2026, 3, 2))


@pytest.mark.asyncio
async def test_invalid_interval(client: AsyncClient, org_headers, rooms):
    response = await client.get(
        "/api/v1/availability",
        params={"category": "room", "checkin": "2026-03-05", "checkout": "2026-03-01"},
        headers=org_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_occupancy_counts_nights_only(client: AsyncClient, org_headers, rooms, booking_payload):
    await book(client, org_headers, booking_payload("2026-03-01", "2026-03-03"))

    response = await client.get(
        "/api/v1/occupancy", params={"start": "2026-03-01", "end": "2026-03-03"}, headers=org_headers
    )

    assert response.status_code == 200
    days = response.json()
    assert [day["occupied"] for day in days] == [1, 1, 0]
    assert days[0] == {"date": "2026-03-01", "occupied": 1, "total": 3, "percentage": 33}


@pytest.mark.asyncio
async def test_occupancy_rejects_reversed_range(db_session: AsyncSession, rooms):
    with pytest.raises(InvalidInterval):
        await get_occupancy(db_session, 1, date(2026, 3, 5), date(2026, 3, 1))

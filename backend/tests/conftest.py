"""
Pytest fixtures for test database, client, and tenant seed data.

Each test gets a fresh schema. TEST_DATABASE_URL can point at a PostgreSQL
database; by default a throwaway SQLite file is used.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")

from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.models import (
    Customer,
    Organization,
    OrganizationCurrency,
    Resource,
    ResourceCategory,
    ResourceType,
)

ORG_HEADERS = {"X-Organization-ID": "1"}


@pytest.fixture
def database_url(tmp_path) -> str:
    return os.environ.get("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/test.db")


@pytest_asyncio.fixture(scope="function")
async def db_session(database_url: str) -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    engine = create_async_engine(database_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def org_headers() -> dict:
    return dict(ORG_HEADERS)


@pytest_asyncio.fixture
async def organization(db_session: AsyncSession) -> Organization:
    """Tenant 1 with USD as base currency, plus an unrelated tenant 2."""
    org = Organization(id=1, name="Hotel Andino")
    other = Organization(id=2, name="Other Tenant")
    db_session.add_all([org, other])
    await db_session.flush()
    db_session.add_all(
        [
            OrganizationCurrency(organization_id=org.id, code="USD", is_base=True, is_active=True),
            OrganizationCurrency(organization_id=org.id, code="EUR", is_base=False, is_active=True),
        ]
    )
    await db_session.commit()
    return org


@pytest_asyncio.fixture
async def room_type(db_session: AsyncSession, organization: Organization) -> ResourceType:
    """Bookable "room" category with a 100.00 base rate type."""
    category = ResourceCategory(code="room", name="Rooms", is_bookable=True)
    db_session.add(category)
    await db_session.flush()

    resource_type = ResourceType(
        organization_id=organization.id,
        category_id=category.id,
        name="Double",
        base_rate=Decimal("100.00"),
        capacity=2,
    )
    db_session.add(resource_type)
    await db_session.commit()
    await db_session.refresh(resource_type)
    return resource_type


@pytest_asyncio.fixture
async def rooms(db_session: AsyncSession, organization: Organization, room_type: ResourceType) -> list[Resource]:
    """Three rooms; 103 is under maintenance."""
    resources = [
        Resource(organization_id=organization.id, resource_type_id=room_type.id, label="101", floor_zone="1"),
        Resource(organization_id=organization.id, resource_type_id=room_type.id, label="102", floor_zone="1"),
        Resource(
            organization_id=organization.id,
            resource_type_id=room_type.id,
            label="103",
            floor_zone="1",
            status="maintenance",
        ),
    ]
    db_session.add_all(resources)
    await db_session.commit()
    return resources


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession, organization: Organization) -> Customer:
    customer = Customer(
        organization_id=organization.id,
        first_name="Ana",
        last_name="Restrepo",
        email="ana@example.com",
        phone="3001234567",
        document_number="1020304050",
    )
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer


@pytest.fixture
def booking_payload(customer: Customer, rooms: list[Resource]):
    """Builds a booking request body; defaults to room 101."""

    def build(checkin: str, checkout: str, resource_ids=None, **extra) -> dict:
        payload = {
            "customer_id": customer.id,
            "checkin": checkin,
            "checkout": checkout,
            "resource_ids": resource_ids or [rooms[0].id],
            "occupant_count": 2,
            "total_estimated": "400.00",
        }
        payload.update(extra)
        return payload

    return build
